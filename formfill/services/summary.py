from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering.

Format:
SUMMARY rows={total} success={success} failed={failed} elapsed_sec={elapsed} output_dir={dir}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a finished run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = ProcessingResult(
        ...     success_rows=3, failed_rows=0, start_time=t, end_time=t,
        ...     elapsed_seconds=1.5, output_dir="formularios_generados",
        ... )
        >>> render_summary_line(result)
        'SUMMARY rows=3 success=3 failed=0 elapsed_sec=1.5 output_dir=formularios_generados'
    """
    return (
        f"SUMMARY rows={result.total_rows} "
        f"success={result.success_rows} "
        f"failed={result.failed_rows} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)} "
        f"output_dir={result.output_dir}"
    )
