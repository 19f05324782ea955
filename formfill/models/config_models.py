from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

"""Config dataclasses for the CSV -> PDF form filler.

The pipeline entry point receives a single FillConfig instance. Defaults match
the file layout the tool has always used (template.pdf / values.csv next to
the working directory, output into formularios_generados/).
"""

__all__ = [
    "DEFAULT_TEMPLATE",
    "DEFAULT_CSV_FILE",
    "DEFAULT_OUTPUT_DIR",
    "ON_ERROR_ABORT",
    "ON_ERROR_CONTINUE",
    "FillConfig",
]

DEFAULT_TEMPLATE = "template.pdf"
DEFAULT_CSV_FILE = "values.csv"
DEFAULT_OUTPUT_DIR = "formularios_generados"

ON_ERROR_ABORT = "abort"
ON_ERROR_CONTINUE = "continue"


@dataclass(frozen=True)
class FillConfig:
    """Root configuration object for a fill run.

    on_error selects the failure policy: "abort" stops the batch on the first
    row that cannot be written, "continue" records the failure and moves on.
    """
    template: str = DEFAULT_TEMPLATE  # PDF form template (read-only)
    csv_file: str = DEFAULT_CSV_FILE  # Field;Value;Field;Value rows
    output_dir: str = DEFAULT_OUTPUT_DIR  # Created if missing
    filename_prefix: str = "formulario"
    month_field: str = "MES"
    year_field: str = "ANIO"
    on_error: str = ON_ERROR_ABORT
    optimize: bool = True  # garbage collect + deflate on save
    error_log_dir: str = "logs"

    @property
    def template_path(self) -> Path:
        return Path(self.template)

    @property
    def csv_path(self) -> Path:
        return Path(self.csv_file)

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)

    @property
    def continue_on_error(self) -> bool:
        return self.on_error == ON_ERROR_CONTINUE

    def with_overrides(self, **overrides: object) -> FillConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)  # type: ignore[arg-type]
