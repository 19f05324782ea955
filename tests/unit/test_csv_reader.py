from __future__ import annotations

from pathlib import Path

import pytest

from formfill.csvfile.reader import CsvReadError, detect_delimiter, pairs_from_cells, read_rows


def test_detect_delimiter_semicolon(write_csv):
    p = write_csv("a;b;c,d\nx;y\n")
    assert detect_delimiter(p) == ";"


def test_detect_delimiter_tie_defaults_to_comma(write_csv):
    p = write_csv("a;b,c\n")
    assert detect_delimiter(p) == ","


def test_detect_delimiter_only_looks_at_first_1000_bytes(write_csv):
    head = "a,b\n" * 250  # 1000 bytes, 250 commas
    p = write_csv(head + ";" * 2000 + "\n")
    assert detect_delimiter(p) == ","


def test_read_rows_semicolon_pairs(write_csv, sample_csv_text):
    rows = read_rows(write_csv(sample_csv_text))
    assert len(rows) == 2
    assert rows[0].index == 1
    assert rows[0].source_row == 1
    assert rows[0].values == {"MES": "3", "ANIO": "23", "NOMBRE": "Ana Pérez", "ACEPTA": "/Yes"}
    assert list(rows[1].values) == ["MES", "ANIO", "NOMBRE", "ACEPTA"]


def test_read_rows_comma_and_bom(write_csv):
    p = write_csv("Field,Value\nMES,4\n", bom=True)
    rows = read_rows(p)
    assert [r.values for r in rows] == [{"MES": "4"}]


def test_header_row_never_used_as_values(write_csv):
    # header looks exactly like a data row
    p = write_csv("MES;1;ANIO;21\nMES;2;ANIO;22\n")
    rows = read_rows(p)
    assert len(rows) == 1
    assert rows[0].values == {"MES": "2", "ANIO": "22"}


def test_trailing_odd_cell_and_blank_names_dropped(write_csv):
    p = write_csv("h\n A ; 1 ;;orphan; B ;2;C\n")
    rows = read_rows(p)
    assert rows[0].values == {"A": "1", "B": "2"}


def test_rows_without_pairs_are_omitted_and_indexes_stay_dense(write_csv):
    p = write_csv("h;h\nA;1\n\n;x\nONLY\nB;2\n")
    rows = read_rows(p)
    assert [r.index for r in rows] == [1, 2]
    assert [r.values for r in rows] == [{"A": "1"}, {"B": "2"}]
    assert rows[1].source_row == 5


def test_duplicate_field_last_wins(write_csv):
    p = write_csv("h\nA;1;B;2;A;3\n")
    rows = read_rows(p)
    assert rows[0].values == {"A": "3", "B": "2"}
    assert list(rows[0].values) == ["A", "B"]


def test_quoted_cells_keep_delimiter(write_csv):
    p = write_csv('h;h\nNOMBRE;"Pérez; Ana"\n')
    rows = read_rows(p)
    assert rows[0].values == {"NOMBRE": "Pérez; Ana"}


def test_pairs_from_cells():
    assert pairs_from_cells([]) == {}
    assert pairs_from_cells(["A"]) == {}
    assert pairs_from_cells(["A", ""]) == {"A": ""}


def test_read_rows_missing_file(temp_workdir: Path):
    with pytest.raises(CsvReadError, match="not found"):
        read_rows(temp_workdir / "missing.csv")


def test_read_rows_invalid_utf8(temp_workdir: Path):
    p = temp_workdir / "latin1.csv"
    p.write_bytes("h;h\nNOMBRE;Montréal\n".encode("latin-1"))
    with pytest.raises(CsvReadError):
        read_rows(p)
