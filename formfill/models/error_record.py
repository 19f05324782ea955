from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

from .row_data import RowData

"""One failed row, as written to the JSON Lines error log.

A record points back at the input twice: `row` is the 1-based row index used
in output filenames, `source_row` the CSV record number (header = 0) so the
offending line can be found in the file even when empty lines were skipped.
row=-1 marks a failure that belongs to the run rather than to a row.

Shape is checked by formfill/config/error_log_schema.json.
"""

__all__ = [
    "ErrorRecord",
    "RUN_LEVEL_ROW",
]

RUN_LEVEL_ROW = -1


@dataclass(frozen=True)
class ErrorRecord:
    timestamp: str  # ISO8601 UTC, 'Z' suffix
    file: str
    row: int
    source_row: int | None
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(
        file: str,
        row: int,
        error_type: str,
        message: str,
        *,
        source_row: int | None = None,
    ) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            source_row=source_row,
            error_type=error_type,
            message=message,
        )

    @classmethod
    def for_row(cls, file: str, row: RowData, error_type: str, message: str) -> ErrorRecord:
        """Record for a row that could not be filled or written."""
        return cls.create(file, row.index, error_type, message, source_row=row.source_row)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
