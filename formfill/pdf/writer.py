from __future__ import annotations

import logging
from pathlib import Path

from ..models.form_field import FilledForm

"""Output writer: names and saves one filled PDF per row."""

__all__ = [
    "OutputError",
    "output_filename",
    "write_document",
]

logger = logging.getLogger(__name__)


class OutputError(Exception):
    """Raised when a filled form cannot be written. Carries the row index."""

    def __init__(self, row_index: int, message: str) -> None:
        super().__init__(f"row {row_index}: {message}")
        self.row_index = row_index


def output_filename(
    index: int,
    month: str | None = None,
    year: str | None = None,
    prefix: str = "formulario",
) -> str:
    """`{prefix}_{year}-{month}_{index}.pdf` when both were captured, else `{prefix}_{index}.pdf`."""
    if month is not None and year is not None:
        return f"{prefix}_{year}-{month}_{index}.pdf"
    return f"{prefix}_{index}.pdf"


def write_document(
    filled: FilledForm,
    output_dir: Path,
    *,
    prefix: str = "formulario",
    optimize: bool = True,
) -> Path:
    """Save the filled document into output_dir and close it.

    With optimize, unused objects are dropped and streams compressed
    (garbage=4, deflate=True).

    Raises:
        OutputError: directory creation or save failed
    """
    target = output_dir / output_filename(filled.row_index, filled.month, filled.year, prefix)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        if optimize:
            filled.document.save(str(target), garbage=4, deflate=True)
        else:
            filled.document.save(str(target))
    except Exception as e:
        raise OutputError(filled.row_index, f"cannot write {target}: {e}") from e
    finally:
        filled.document.close()
    logger.info(f"  -> {target.name}")
    return target
