from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for the CSV -> PDF form filler.

RowStat records what happened to one CSV row, ProcessingResult aggregates a
whole run and feeds the SUMMARY line.
"""

ROW_SUCCESS = "success"
ROW_FAILED = "failed"


@dataclass(frozen=True)
class RowStat:
    """Per-row processing statistics."""
    row_index: int  # 1-based, same as in the output filename
    status: str  # success/failed
    filename: str | None  # None when the row failed before a name was computed
    fields_set: int  # fields found in the template and written
    fields_skipped: int  # names absent from the template
    elapsed_seconds: float
    error: str | None = None


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for a fill run."""
    success_rows: int
    failed_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    output_dir: str
    row_stats: list[RowStat] | None = None
    error_log: str | None = None  # JSON lines file, set only when failures were logged

    @property
    def total_rows(self) -> int:
        return self.success_rows + self.failed_rows

    @property
    def written_files(self) -> list[str]:
        return [s.filename for s in self.row_stats or [] if s.status == ROW_SUCCESS and s.filename]
