from __future__ import annotations

from dataclasses import dataclass, field

"""RowData model for the CSV -> PDF form filler.

RowData represents one CSV data row after it has been split into
(field name, value) pairs. Rows that produced no pairs never become RowData.
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """Ordered field name -> raw value mapping for a single form.

    index is the 1-based position among kept rows and is what output filenames
    and error reports refer to. source_row is the CSV record number (header = 0)
    for tracing a row back to the input file.
    """
    index: int
    values: dict[str, str] = field(default_factory=dict)
    source_row: int | None = None

    def __len__(self) -> int:
        return len(self.values)

    def items(self):
        return self.values.items()
