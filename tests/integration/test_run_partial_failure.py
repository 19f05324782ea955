from __future__ import annotations

import json
from pathlib import Path

import pytest

from formfill.cli.__main__ import main as cli_main
from formfill.logging.init import reset_logging

"""Integration test: a row whose output file cannot be written.

Row 2 targets a path occupied by a non-empty directory, so saving it fails
while rows 1 and 3 succeed. With --continue-on-error the run ends with exit
code 2 and a JSON Lines error log; without it the run aborts with exit code 1.
"""

CSV_TEXT = (
    "Field;Value;Field;Value\n"
    "MES;1;ANIO;24\n"
    "MES;2;ANIO;24\n"
    "MES;3;ANIO;24\n"
)


@pytest.fixture
def blocked_second_row(make_template, write_csv, temp_workdir: Path) -> Path:
    make_template()
    write_csv(CSV_TEXT)
    out_dir = temp_workdir / "formularios_generados"
    # a non-empty directory where the second PDF should go
    blocker = out_dir / "formulario_2024-02_2.pdf"
    blocker.mkdir(parents=True)
    (blocker / "keep.txt").write_text("occupied", encoding="utf-8")
    return out_dir


def test_continue_on_error_reports_partial_failure(blocked_second_row: Path, temp_workdir: Path, capsys):
    reset_logging()

    code = cli_main(["--continue-on-error"])

    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR row 2: cannot write" in out
    assert "SUMMARY rows=3 success=2 failed=1" in out
    assert (blocked_second_row / "formulario_2024-01_1.pdf").is_file()
    assert (blocked_second_row / "formulario_2024-03_3.pdf").is_file()

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    record = json.loads(logs[0].read_text(encoding="utf-8").strip())
    assert record["row"] == 2
    assert record["error_type"] == "OUTPUT_WRITE_FAILED"
    assert record["source_row"] == 2
    assert "WARN 1 row(s) failed (2), details in" in out


def test_abort_stops_at_failed_row(blocked_second_row: Path, temp_workdir: Path, capsys):
    reset_logging()

    code = cli_main([])

    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR processing: row 2: cannot write" in out
    assert "(aborted after 1 of 3 rows written)" in out
    assert "SUMMARY" not in out
    assert (blocked_second_row / "formulario_2024-01_1.pdf").is_file()
    assert not (blocked_second_row / "formulario_2024-03_3.pdf").exists()
    assert list((temp_workdir / "logs").glob("errors-*.log")) == []
