from __future__ import annotations

from pathlib import Path

from exbook.core.workbook import load_openpyxl_workbook, openpyxl_workbook


def test_openpyxl_workbook_reads_sheetnames(sample_book: Path) -> None:
    with openpyxl_workbook(sample_book, data_only=True, read_only=True) as workbook:
        assert workbook.sheetnames == ["Data", "Notes"]


def test_load_openpyxl_workbook_keeps_formulas(sample_book: Path) -> None:
    workbook = load_openpyxl_workbook(sample_book)
    try:
        assert workbook["Data"]["B4"].value == "=SUM(B2:B3)"
    finally:
        workbook.close()
