from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

import fitz  # PyMuPDF

from ..models.form_field import (
    CHECKBOX_OFF,
    CHECKBOX_ON,
    FieldAssignment,
    FieldKind,
    FilledForm,
)
from ..models.row_data import RowData
from ..services.normalize import is_truthy, normalize_field, strip_checkbox_prefix

"""AcroForm filling with PyMuPDF.

fill_form() is a function of (template bytes, row): every call opens its own
document from the bytes, so nothing written for one row can leak into the
next. Field names from the CSV that the template does not define are skipped.
Once all values are set, the appearance stream of every fillable widget is
regenerated so viewers that do not render field values still show them.
"""

__all__ = [
    "TemplateError",
    "load_template",
    "open_template",
    "field_kind",
    "list_form_fields",
    "template_fields",
    "fill_form",
]

logger = logging.getLogger(__name__)


class TemplateError(Exception):
    """Raised when the PDF template cannot be read or parsed."""


def load_template(path: Path) -> bytes:
    """Read the template once and make sure PyMuPDF can open it."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise TemplateError(f"cannot read template {path}: {e}") from e
    with open_template(data) as doc:
        if not doc.is_form_pdf:
            logger.warning(f"template has no form fields: {path}")
    return data


def open_template(data: bytes) -> fitz.Document:
    try:
        return fitz.open(stream=data, filetype="pdf")
    except RuntimeError as e:  # fitz.FileDataError / EmptyFileError
        raise TemplateError(f"invalid pdf template: {e}") from e


def field_kind(widget: Any) -> FieldKind | None:
    """Map a PyMuPDF widget type onto FieldKind; None if it holds no value."""
    match widget.field_type:
        case fitz.PDF_WIDGET_TYPE_CHECKBOX | fitz.PDF_WIDGET_TYPE_RADIOBUTTON:
            return FieldKind.CHECKBOX
        case fitz.PDF_WIDGET_TYPE_TEXT | fitz.PDF_WIDGET_TYPE_COMBOBOX | fitz.PDF_WIDGET_TYPE_LISTBOX:
            return FieldKind.TEXT
        case _:
            return None  # push buttons, signatures


def _widgets(doc: fitz.Document):
    for page in doc:
        yield from page.widgets() or []


def list_form_fields(doc: fitz.Document) -> dict[str, FieldKind]:
    """Fillable field names of the document in widget order (first kind wins)."""
    fields: dict[str, FieldKind] = {}
    for w in _widgets(doc):
        kind = field_kind(w)
        if kind is None or not w.field_name:
            continue
        fields.setdefault(w.field_name, kind)
    return fields


def template_fields(template: bytes) -> dict[str, FieldKind]:
    with open_template(template) as doc:
        return list_form_fields(doc)


def _current_value(widget: Any) -> str:
    value = widget.field_value
    if value is None or value is False:
        return ""
    return str(value)


def _checked_state(widget: Any) -> str:
    """On-state to write for a checked button, or "Off" for the other radio options."""
    on = widget.on_state()
    if widget.field_type == fitz.PDF_WIDGET_TYPE_RADIOBUTTON:
        # one option per group: the one exporting "Yes"
        return on if on == CHECKBOX_ON else CHECKBOX_OFF
    return on or CHECKBOX_ON


def _write_value(widget: Any, assignment: FieldAssignment) -> None:
    match assignment.kind:
        case FieldKind.CHECKBOX:
            if assignment.checked:
                widget.field_value = _checked_state(widget)
            else:
                widget.field_value = CHECKBOX_OFF
        case FieldKind.TEXT:
            widget.field_value = assignment.value


def _apply_assignments(doc: fitz.Document, pending: dict[str, FieldAssignment]) -> list[FieldAssignment]:
    """Write pending values and regenerate appearances of all fillable widgets."""
    applied: dict[str, FieldAssignment] = {}
    for w in _widgets(doc):
        if field_kind(w) is None:
            continue
        assignment = pending.get(w.field_name)
        if assignment is not None:
            if assignment.name not in applied:
                applied[assignment.name] = replace(assignment, previous=_current_value(w))
            _write_value(w, assignment)
        w.update()
    # keep CSV order
    return [applied[name] for name in pending if name in applied]


def fill_form(
    template: bytes,
    row: RowData,
    *,
    month_field: str = "MES",
    year_field: str = "ANIO",
) -> FilledForm:
    """Fill a fresh copy of the template with one row.

    The normalized month/year values are captured on the result even when the
    template has no such field; they drive the output filename.

    Raises:
        TemplateError: if the template bytes do not open as a PDF
    """
    doc = open_template(template)
    try:
        kinds = list_form_fields(doc)
        filled = FilledForm(document=doc, row_index=row.index)
        pending: dict[str, FieldAssignment] = {}

        for name, raw in row.items():
            value = normalize_field(name, raw, month_field=month_field, year_field=year_field)
            if name == month_field:
                filled.month = value
            elif name == year_field:
                filled.year = value
            value = strip_checkbox_prefix(value)

            match kinds.get(name):
                case FieldKind.CHECKBOX:
                    state = CHECKBOX_ON if is_truthy(value) else CHECKBOX_OFF
                    pending[name] = FieldAssignment(name, FieldKind.CHECKBOX, state)
                case FieldKind.TEXT:
                    pending[name] = FieldAssignment(name, FieldKind.TEXT, value)
                case None:
                    filled.skipped_fields.append(name)
                    logger.debug(f"row {row.index}: no form field named '{name}', skipped")

        filled.assignments = _apply_assignments(doc, pending)
    except Exception:
        doc.close()
        raise

    for a in filled.assignments:
        logger.info(f"  {a.describe()}")
    return filled
