from __future__ import annotations

from pathlib import Path

from openpyxl import load_workbook
import pytest

from exbook.backend import CellStyle, OpenpyxlBackend
from exbook.errors import (
    SheetExistsError,
    SheetNotFoundError,
    WorkbookParseError,
)
from exbook.shared.a1 import resolve_cell


def test_read_workbook_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Workbook not found"):
        OpenpyxlBackend().read_workbook(tmp_path / "missing.xlsx")


def test_read_workbook_rejects_garbage(tmp_path: Path) -> None:
    path = tmp_path / "broken.xlsx"
    path.write_text("not a zip", encoding="utf-8")
    with pytest.raises(WorkbookParseError, match="Failed to read workbook"):
        OpenpyxlBackend().read_workbook(path)


def test_get_cell_value_formula_and_style(sample_book: Path) -> None:
    backend = OpenpyxlBackend()
    handle = backend.read_workbook(sample_book)
    assert backend.sheet_names(handle) == ["Data", "Notes"]

    amount = backend.get_cell(handle, "Data", resolve_cell("B2"))
    assert amount.value == 10
    assert amount.formula is None
    assert amount.style.number_format == "0.00"

    total = backend.get_cell(handle, "Data", resolve_cell("B4"))
    assert total.formula == "=SUM(B2:B3)"
    assert total.value is None

    header = backend.get_cell(handle, "Data", resolve_cell("B1"))
    assert header.value == "amount"
    assert header.style.bold is True
    assert header.style.font_color == "FF112233"
    assert header.style.fill_color == "FFFF0000"
    assert header.style.horizontal_align == "center"


def test_get_cell_unknown_sheet(sample_book: Path) -> None:
    backend = OpenpyxlBackend()
    handle = backend.read_workbook(sample_book)
    with pytest.raises(SheetNotFoundError, match="Sheet not found: Missing"):
        backend.get_cell(handle, "Missing", resolve_cell("A1"))


def test_set_cell_value_formula_and_style(tmp_path: Path) -> None:
    backend = OpenpyxlBackend()
    handle = backend.new_workbook()
    backend.set_cell(handle, "Sheet1", resolve_cell("A1"), 5)
    backend.set_cell(
        handle,
        "Sheet1",
        resolve_cell("A2"),
        "=A1*2",
        CellStyle(bold=True, fill_color="00ff00", wrap_text=True),
    )
    out = tmp_path / "nested" / "out.xlsx"
    backend.write_workbook(handle, out)

    workbook = load_workbook(out)
    try:
        sheet = workbook["Sheet1"]
        assert sheet["A1"].value == 5
        assert sheet["A2"].value == "=A1*2"
        assert sheet["A2"].font.b is True
        assert sheet["A2"].fill.fgColor.rgb == "FF00FF00"
        assert sheet["A2"].alignment.wrap_text is True
    finally:
        workbook.close()


def test_set_cell_updates_cached_twin(sample_book: Path) -> None:
    backend = OpenpyxlBackend()
    handle = backend.read_workbook(sample_book)
    coordinate = resolve_cell("C1")
    backend.set_cell(handle, "Data", coordinate, "new")
    assert backend.get_cell(handle, "Data", coordinate).value == "new"


def test_add_and_remove_sheet(sample_book: Path) -> None:
    backend = OpenpyxlBackend()
    handle = backend.read_workbook(sample_book)
    backend.add_sheet(handle, "Extra")
    assert backend.sheet_names(handle) == ["Data", "Notes", "Extra"]
    with pytest.raises(SheetExistsError):
        backend.add_sheet(handle, "Extra")
    backend.remove_sheet(handle, "Notes")
    assert backend.sheet_names(handle) == ["Data", "Extra"]
    with pytest.raises(SheetNotFoundError):
        backend.remove_sheet(handle, "Notes")


def test_cell_style_rejects_bad_color() -> None:
    with pytest.raises(ValueError, match="Invalid color format"):
        CellStyle(font_color="red")


def test_get_cell_does_not_create_missing_cells(sample_book: Path) -> None:
    backend = OpenpyxlBackend()
    handle = backend.read_workbook(sample_book)
    sheet = backend.get_sheet(handle, "Data")
    blank = backend.get_cell(handle, "Data", resolve_cell("AZ900"))
    assert blank.value is None
    assert blank.formula is None
    assert (sheet.max_row, sheet.max_column) == (4, 2)
    assert handle.values is not None
    assert (handle.values["Data"].max_row, handle.values["Data"].max_column) == (4, 2)
