from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the calendar import tool.

Built by agrocal.config.loader from config/agrocal.yml after schema
validation; the rest of the tool only sees these typed objects.
"""

DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for batch imports.

    The parser itself is configuration-free; these settings belong to the
    caller side (which files to read, how large they may be, where the JSON
    documents and warning logs go).
    """
    source_directory: str  # Directory scanned for spreadsheets / CSV files
    output_directory: str  # Directory receiving one JSON document per input file
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES  # Files above this size are rejected unread
    reference_data: str | None = None  # Alternate reference-data YAML (None = packaged default)
    log_directory: str = "./logs"  # JSON Lines warning logs
