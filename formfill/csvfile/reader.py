from __future__ import annotations

import csv
from collections.abc import Iterable
from pathlib import Path

from ..models.row_data import RowData

"""CSV reader for Field;Value;Field;Value rows.

- The delimiter is `;` when it outnumbers `,` in the first 1000 bytes, else `,`.
- The first record is a header and is always discarded.
- Each following record holds alternating (field name, value) cells. A trailing
  cell without a value is dropped, as are pairs whose name is blank.
- Records that yield no pair are left out entirely.
"""

__all__ = [
    "CsvReadError",
    "SAMPLE_BYTES",
    "detect_delimiter",
    "pairs_from_cells",
    "read_rows",
]

SAMPLE_BYTES = 1000
CSV_ENCODING = "utf-8-sig"  # transparent BOM


class CsvReadError(Exception):
    """Raised when the CSV file cannot be opened or decoded."""


def detect_delimiter(path: Path) -> str:
    """Pick `;` or `,` by comparing their counts in the first SAMPLE_BYTES bytes."""
    try:
        with path.open("rb") as f:
            sample = f.read(SAMPLE_BYTES)
    except OSError as e:
        raise CsvReadError(f"cannot read csv file {path}: {e}") from e
    return ";" if sample.count(b";") > sample.count(b",") else ","


def pairs_from_cells(cells: Iterable[str]) -> dict[str, str]:
    """Turn [name, value, name, value, ...] into an ordered mapping.

    Later duplicates overwrite earlier values (the key keeps its first position).
    """
    cells = list(cells)
    values: dict[str, str] = {}
    for j in range(0, len(cells) - 1, 2):
        name = (cells[j] or "").strip()
        if not name:
            continue
        values[name] = (cells[j + 1] or "").strip()
    return values


def read_rows(path: Path, delimiter: str | None = None) -> list[RowData]:
    """Read every data row of the CSV file.

    Parameters
    ----------
    path: CSV file path
    delimiter: explicit delimiter; detected from the file when None

    Raises
    ------
    CsvReadError: if the file is missing, unreadable or not valid UTF-8
    """
    if not path.exists():
        raise CsvReadError(f"csv file not found: {path}")
    delim = delimiter or detect_delimiter(path)

    rows: list[RowData] = []
    try:
        with path.open("r", encoding=CSV_ENCODING, newline="") as f:
            for record_no, cells in enumerate(csv.reader(f, delimiter=delim)):
                if record_no == 0:
                    continue  # header
                values = pairs_from_cells(cells)
                if not values:
                    continue
                rows.append(RowData(index=len(rows) + 1, values=values, source_row=record_no))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise CsvReadError(f"cannot parse csv file {path}: {e}") from e
    return rows
