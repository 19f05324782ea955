# Shared pytest fixtures
from __future__ import annotations
import logging
import tempfile
from collections.abc import Callable, Iterable
from pathlib import Path

import fitz  # PyMuPDF
import pytest


def build_template(
    path: Path,
    text_fields: Iterable[str] = (),
    checkbox_fields: Iterable[str] = (),
) -> Path:
    """Create a one-page AcroForm PDF with the given text and checkbox fields."""
    doc = fitz.open()
    page = doc.new_page()
    y = 40
    for name in text_fields:
        w = fitz.Widget()
        w.field_name = name
        w.field_type = fitz.PDF_WIDGET_TYPE_TEXT
        w.rect = fitz.Rect(50, y, 300, y + 20)
        w.field_value = ""
        page.add_widget(w)
        y += 30
    for name in checkbox_fields:
        w = fitz.Widget()
        w.field_name = name
        w.field_type = fitz.PDF_WIDGET_TYPE_CHECKBOX
        w.rect = fitz.Rect(50, y, 70, y + 20)
        w.field_value = False
        page.add_widget(w)
        y += 30
    doc.save(str(path))
    doc.close()
    return path


def read_fields(path: Path) -> dict[str, object]:
    """Field name -> value of a written PDF."""
    values: dict[str, object] = {}
    with fitz.open(str(path)) as doc:
        for page in doc:
            for w in page.widgets() or []:
                values[w.field_name] = w.field_value
    return values


def is_checked(value: object) -> bool:
    return value not in (None, False, "", "Off")


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def make_template(temp_workdir: Path) -> Callable[..., Path]:
    def _make(name: str = "template.pdf", text_fields=("MES", "ANIO", "NOMBRE"), checkbox_fields=("ACEPTA",)) -> Path:
        return build_template(temp_workdir / name, text_fields, checkbox_fields)
    return _make


@pytest.fixture()
def write_csv(temp_workdir: Path) -> Callable[..., Path]:
    def _write(text: str, name: str = "values.csv", bom: bool = False) -> Path:
        p = temp_workdir / name
        p.write_bytes(("\ufeff" if bom else "").encode("utf-8") + text.encode("utf-8"))
        return p
    return _write


@pytest.fixture()
def sample_csv_text() -> str:
    return (
        "Field;Value;Field;Value;Field;Value;Field;Value\n"
        "MES;3;ANIO;23;NOMBRE;Ana Pérez;ACEPTA;/Yes\n"
        "MES;11;ANIO;2024;NOMBRE;Luis;ACEPTA;no\n"
    )


@pytest.fixture()
def sample_config_yaml() -> str:
    return """template: template.pdf
csv_file: values.csv
output_dir: out
on_error: abort
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "fill.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_inputs(make_template, write_csv, sample_csv_text) -> tuple[Path, Path]:
    """template.pdf + values.csv with two rows in the working directory."""
    return make_template(), write_csv(sample_csv_text)


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


@pytest.fixture()
def formfill_log():
    """Collect messages of the 'formfill' logger tree regardless of propagation."""
    logger = logging.getLogger("formfill")
    handler = _ListHandler()
    old_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield handler.messages
    logger.removeHandler(handler)
    logger.setLevel(old_level)


@pytest.fixture(autouse=True)
def _detach_app_logger():
    """Drop handlers bound to a previous test's captured stdout."""
    yield
    from formfill.logging.init import reset_logging
    reset_logging()
    logger = logging.getLogger("formfill")
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
