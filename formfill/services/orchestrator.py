from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..csvfile.reader import CsvReadError, read_rows
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import FillConfig
from ..models.error_record import ErrorRecord
from ..models.processing_result import ROW_FAILED, ROW_SUCCESS, ProcessingResult, RowStat
from ..models.row_data import RowData
from ..pdf.form_filler import TemplateError, fill_form, load_template
from ..pdf.writer import OutputError, write_document
from .progress import ProgressTracker

"""Pipeline driver for the CSV -> PDF form filler.

Init -> LoadCSV -> (for each row: Fill -> Write) -> Done

- The CSV and the template are loaded before anything is written; failing to
  read either one is fatal.
- Rows are processed one at a time in CSV order, each from a fresh copy of
  the template.
- on_error=abort (default) stops at the first row that cannot be filled or
  written. on_error=continue logs the failure to the JSON Lines error log and
  moves on to the next row.
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that ends the run."""
    pass


def _describe(row: RowData, exc: Exception) -> str:
    if isinstance(exc, OutputError):
        return str(exc)  # already carries the row index
    return f"row {row.index}: {exc}"


def _error_type(exc: Exception) -> str:
    if isinstance(exc, OutputError):
        return "OUTPUT_WRITE_FAILED"
    if isinstance(exc, TemplateError):
        return "TEMPLATE_INVALID"
    return "FILL_FAILED"


def load_inputs(config: FillConfig) -> tuple[list[RowData], bytes]:
    """Read CSV rows and template bytes.

    Raises:
        ProcessingError: if either input is missing or unreadable
    """
    try:
        rows = read_rows(config.csv_path)
    except CsvReadError as e:
        raise ProcessingError(f"input: {e}") from e
    try:
        template = load_template(config.template_path)
    except TemplateError as e:
        raise ProcessingError(f"input: {e}") from e
    return rows, template


def process_row(template: bytes, row: RowData, config: FillConfig) -> RowStat:
    """Fill and write a single row. Exceptions propagate to the caller."""
    started = datetime.now(UTC)
    filled = fill_form(
        template,
        row,
        month_field=config.month_field,
        year_field=config.year_field,
    )
    path = write_document(
        filled,
        config.output_path,
        prefix=config.filename_prefix,
        optimize=config.optimize,
    )
    return RowStat(
        row_index=row.index,
        status=ROW_SUCCESS,
        filename=path.name,
        fields_set=len(filled.assignments),
        fields_skipped=len(filled.skipped_fields),
        elapsed_seconds=(datetime.now(UTC) - started).total_seconds(),
    )


def process_all(config: FillConfig) -> ProcessingResult:
    """Fill one PDF per CSV row.

    Args:
        config: run configuration (paths, field names, error policy)

    Returns:
        ProcessingResult with per-row stats

    Raises:
        ProcessingError: input errors, or the first row failure when
            on_error is "abort"
    """
    start_time = datetime.now(UTC)
    rows, template = load_inputs(config)
    logger.info(f"Processing {len(rows)} rows from {config.csv_path}")

    error_log = ErrorLogBuffer(Path(config.error_log_dir))
    row_stats: list[RowStat] = []
    success_count = 0
    failed_count = 0

    with ProgressTracker(len(rows)) as progress:
        for row in rows:
            progress.start_row(row.index)
            logger.info(f"row {row.index}:")
            row_start = datetime.now(UTC)
            try:
                stat = process_row(template, row, config)
                success_count += 1
            except Exception as e:
                message = _describe(row, e)
                if not config.continue_on_error:
                    raise ProcessingError(
                        f"{message} (aborted after {success_count} of {len(rows)} rows written)"
                    ) from e
                logger.error(message)
                error_log.append(
                    ErrorRecord.for_row(config.csv_path.name, row, _error_type(e), message)
                )
                failed_count += 1
                stat = RowStat(
                    row_index=row.index,
                    status=ROW_FAILED,
                    filename=None,
                    fields_set=0,
                    fields_skipped=0,
                    elapsed_seconds=(datetime.now(UTC) - row_start).total_seconds(),
                    error=message,
                )
            row_stats.append(stat)
            progress.set_postfix(success=success_count, failed=failed_count)
            progress.finish_row(success=(stat.status == ROW_SUCCESS))

    failed_rows = error_log.failed_rows
    log_path = error_log.flush()
    if log_path is not None:
        rows_text = ", ".join(str(i) for i in failed_rows)
        logger.warning(f"{failed_count} row(s) failed ({rows_text}), details in {log_path}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_rows=success_count,
        failed_rows=failed_count,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        output_dir=str(config.output_path),
        row_stats=row_stats,
        error_log=str(log_path) if log_path is not None else None,
    )
