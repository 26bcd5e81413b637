from __future__ import annotations

import json
import re
from pathlib import Path

from agrocal.logging.warning_log import WarningLogBuffer
from agrocal.models.warning_record import ROW_MAPPING_ERROR, SHEET_PROCESSING_ERROR, ParseWarning


def test_flush_writes_json_lines(tmp_path: Path):
    buf = WarningLogBuffer(tmp_path / "logs")
    buf.append(ParseWarning.create("a.xlsx", "Harvesting", 4, ROW_MAPPING_ERROR, "row skipped"))
    buf.extend([ParseWarning.create("a.xlsx", "Notes", -1, SHEET_PROCESSING_ERROR, "no data rows")])
    assert len(buf) == 2

    path = buf.flush()
    assert path is not None
    assert re.fullmatch(r"warnings-\d{8}-\d{6}\.log", path.name)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["file"] == "a.xlsx"
    assert first["row"] == 4
    assert first["warning_type"] == ROW_MAPPING_ERROR
    assert len(buf) == 0


def test_flush_without_records_creates_nothing(tmp_path: Path):
    buf = WarningLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_repeated_flush_appends_to_same_file(tmp_path: Path):
    buf = WarningLogBuffer(tmp_path)
    buf.append(ParseWarning.create("a.csv", "", 2, ROW_MAPPING_ERROR, "one"))
    first = buf.flush()
    buf.append(ParseWarning.create("a.csv", "", 3, ROW_MAPPING_ERROR, "two"))
    second = buf.flush()
    assert first == second
    assert len(first.read_text(encoding="utf-8").splitlines()) == 2


def test_non_ascii_messages_are_kept(tmp_path: Path):
    buf = WarningLogBuffer(tmp_path)
    buf.append(ParseWarning.create("récolte.xlsx", "", 2, ROW_MAPPING_ERROR, "entrée vide"))
    text = buf.flush().read_text(encoding="utf-8")
    assert "récolte.xlsx" in text
    assert "entrée vide" in text
