"""Tests for spreadsheet ingestion."""

from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import Workbook

from folder_import.config.policies import ColumnPolicy
from folder_import.importer.reader import InputFileError, read_records


def _write_xlsx(path: Path, rows: list[list[object]]) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    workbook.save(path)
    return path


def test_read_xlsx_records(tmp_path: Path) -> None:
    source = _write_xlsx(
        tmp_path / "input.xlsx",
        [
            ["Merk ", "Modellijn", "Sub-modellijn"],
            ["Acme", "Pro", "Pro X"],
            ["  Acme  ", "Pro", None],
        ],
    )

    records = read_records(source)

    assert [record.row_number for record in records] == [2, 3]
    assert records[0].describe() == "Acme > Pro > Pro X"
    assert records[1].brand == "Acme"
    assert records[1].missing_fields() == ["sub-model-line"]


def test_read_csv_records_and_drop_empty_rows(tmp_path: Path) -> None:
    source = tmp_path / "input.csv"
    source.write_text(
        "merk,modellijn,sub-modellijn\n"
        "Acme,Pro,Pro X\n"
        ",,\n"
        "Globex,Max,Max 2\n",
        encoding="utf-8",
    )

    records = read_records(source)

    assert [record.row_number for record in records] == [2, 4]
    assert records[1].describe() == "Globex > Max > Max 2"


def test_custom_column_names(tmp_path: Path) -> None:
    source = tmp_path / "input.csv"
    source.write_text("Brand,Line,Variant\nAcme,Pro,Pro X\n", encoding="utf-8")

    records = read_records(source, ColumnPolicy(brand="brand", model_line="line", sub_model_line="variant"))

    assert records[0].sub_model_line == "Pro X"


def test_missing_headers_yield_skippable_records(tmp_path: Path) -> None:
    source = tmp_path / "input.csv"
    source.write_text("merk,modellijn\nAcme,Pro\n", encoding="utf-8")

    records = read_records(source)

    assert len(records) == 1
    assert not records[0].is_valid


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(InputFileError, match="File not found"):
        read_records(tmp_path / "absent.xlsx")


def test_unsupported_format_raises(tmp_path: Path) -> None:
    source = tmp_path / "input.json"
    source.write_text("{}", encoding="utf-8")

    with pytest.raises(InputFileError, match="Unsupported"):
        read_records(source)


def test_header_only_file_raises(tmp_path: Path) -> None:
    source = tmp_path / "input.csv"
    source.write_text("merk,modellijn,sub-modellijn\n", encoding="utf-8")

    with pytest.raises(InputFileError, match="No data rows"):
        read_records(source)


def test_corrupt_workbook_raises(tmp_path: Path) -> None:
    source = tmp_path / "broken.xlsx"
    source.write_bytes(b"not a zip archive")

    with pytest.raises(InputFileError, match="Failed to read"):
        read_records(source)
