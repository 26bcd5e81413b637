from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..config.reference import ReferenceDataError, load_reference_data
from ..excel.reader import WorkbookError, format_for_path, grid_to_rows, load_source, read_workbook
from ..logging.init import enable_debug, log_summary, setup_logging
from ..services.classifier import detect_commodity
from ..services.orchestrator import ProcessingError, process_all, scan_source_files
from ..services.summary import render_summary_line
from ..services.timeline import build_timeline, find_title

"""CLI entrypoint: `python -m agrocal.cli`.

- loads `.env` (AGROCAL_CONFIG may point at another config file)
- loads and validates the YAML config
- parses every calendar file of source_directory into output_directory
- prints a SUMMARY line and exits with 0 (all parsed), 2 (some files
  failed) or 1 (fatal: config, directory or reference data)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

CONFIG_ENV_VAR = "AGROCAL_CONFIG"


def _load_env_file(path: Path, override: bool = True) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Agricultural calendar / advisory spreadsheet parser")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print detected layout of each file then exit")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: ${CONFIG_ENV_VAR} or {DEFAULT_CONFIG_PATH})")
    return p.parse_args(argv)


def _config_path(args: argparse.Namespace) -> Path:
    if args.config is not None:
        return args.config
    env_path = os.getenv(CONFIG_ENV_VAR)
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def _inspect_data(cfg) -> int:
    try:
        reference = load_reference_data(cfg.reference_data)
        files = scan_source_files(Path(cfg.source_directory))
    except (ReferenceDataError, ProcessingError) as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no calendar files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            grids = read_workbook(load_source(f, cfg.max_file_bytes), format_for_path(f))
        except WorkbookError as e:
            print(f"  read_error: {e}")
            continue
        for grid in grids:
            title = find_title(grid)
            commodity = detect_commodity(f"{title or ''} {f.name}", reference)
            layout = build_timeline(grid, commodity, reference, title=title) if len(grids) == 1 else None
            print(f"  SHEET: {grid.sheet_name or '-'} size={grid.n_rows}x{grid.n_cols} title={title!r} commodity={commodity}")
            if layout is not None:
                tl = layout.timeline
                print(f"    timeline={tl.type} units={len(tl)} months={list(tl.months)} year={tl.year}")
                continue
            rows = grid_to_rows(grid)
            if rows:
                print(f"    cols={rows[0].labels}")
                sample = [{k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in r.values.items()} for r in rows[:3]]
                print("    sample_rows=", sample)
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only read the process arguments when called without an explicit list
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        enable_debug()

    try:
        cfg = load_config(_config_path(args))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    logger.info(f"Parsing files from: {directory}")

    if args.inspect_data:
        return _inspect_data(cfg)

    try:
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    logger.info(f"output={cfg.output_directory} total_records={result.total_records}")

    summary_line = render_summary_line(result.total_files, result)
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
