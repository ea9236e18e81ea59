from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
import pytest

BookFactory = Callable[..., Path]


def _write_book(path: Path) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Data"
    sheet["A1"] = "name"
    sheet["B1"] = "amount"
    sheet["A2"] = "x"
    sheet["B2"] = 10
    sheet["A3"] = "y"
    sheet["B3"] = 20
    sheet["B4"] = "=SUM(B2:B3)"
    sheet["B1"].font = Font(bold=True, color="FF112233")
    sheet["B1"].fill = PatternFill(
        fill_type="solid", start_color="FFFF0000", end_color="FFFF0000"
    )
    sheet["B1"].alignment = Alignment(horizontal="center")
    sheet["B2"].number_format = "0.00"
    notes = workbook.create_sheet("Notes")
    notes["A1"] = "memo"
    path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(path)
    workbook.close()
    return path


@pytest.fixture
def make_book(tmp_path: Path) -> BookFactory:
    """Return a factory writing the sample workbook to ``tmp_path/<name>``."""

    def factory(name: str = "Book1.xlsx", directory: Path | None = None) -> Path:
        return _write_book((directory or tmp_path) / name)

    return factory


@pytest.fixture
def sample_book(make_book: BookFactory) -> Path:
    return make_book()
