from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""Form field domain models.

FieldKind is the closed set of field types the filler knows how to write.
Everything else the template may contain (push buttons, signatures) is treated
like a field name that does not exist.
"""

__all__ = [
    "CHECKBOX_ON",
    "CHECKBOX_OFF",
    "FieldKind",
    "FieldAssignment",
    "FilledForm",
]

CHECKBOX_ON = "Yes"
CHECKBOX_OFF = "Off"


class FieldKind(Enum):
    TEXT = "text"
    CHECKBOX = "checkbox"


@dataclass(frozen=True)
class FieldAssignment:
    """A value about to be written into a named form field."""
    name: str
    kind: FieldKind
    value: str
    previous: str | None = None  # value found in the template, filled in when applied

    @property
    def checked(self) -> bool:
        return self.kind is FieldKind.CHECKBOX and self.value == CHECKBOX_ON

    def describe(self) -> str:
        match self.kind:
            case FieldKind.CHECKBOX:
                return f"{self.name}: {'✓' if self.checked else '✗'}"
            case FieldKind.TEXT:
                return f"{self.name}: '{self.previous or ''}' -> '{self.value}'"


@dataclass
class FilledForm:
    """In-memory filled copy of the template for exactly one row."""
    document: Any  # fitz.Document, owned by this object until written
    row_index: int
    month: str | None = None
    year: str | None = None
    assignments: list[FieldAssignment] = field(default_factory=list)
    skipped_fields: list[str] = field(default_factory=list)
