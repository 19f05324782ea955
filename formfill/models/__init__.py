"""Domain models for the CSV -> PDF form filler.

This package contains the dataclasses passed between the loader, the form
filler, the writer and the orchestrator.
"""

from .config_models import FillConfig
from .error_record import ErrorRecord
from .form_field import FieldAssignment, FieldKind, FilledForm
from .processing_result import ProcessingResult, RowStat
from .row_data import RowData

__all__ = [
    # Configuration models
    "FillConfig",
    # Processing models
    "RowData",
    "FieldKind",
    "FieldAssignment",
    "FilledForm",
    "RowStat",
    "ProcessingResult",
    "ErrorRecord",
]
