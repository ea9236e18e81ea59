from __future__ import annotations

from copy import copy
import logging
from pathlib import Path

from openpyxl import Workbook
from openpyxl.cell.cell import Cell
from openpyxl.styles import PatternFill
from openpyxl.styles.colors import Color
from openpyxl.worksheet.worksheet import Worksheet
from pydantic import BaseModel, ConfigDict

from exbook.core.workbook import load_openpyxl_workbook
from exbook.errors import (
    SheetExistsError,
    SheetNotFoundError,
    WorkbookParseError,
    WorkbookWriteError,
)
from exbook.shared.a1 import Coordinate

from .base import CellData, CellScalar, CellStyle

logger = logging.getLogger(__name__)


class OpenpyxlHandle(BaseModel):
    """In-memory workbook plus an optional cached-values twin.

    ``values`` is loaded with ``data_only=True`` so formula cells can report
    the result Excel last calculated. Workbooks created in memory have none.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    workbook: Workbook
    values: Workbook | None = None
    source: Path | None = None


class OpenpyxlBackend:
    """Spreadsheet backend implemented with openpyxl."""

    def read_workbook(self, path: Path) -> OpenpyxlHandle:
        if not path.is_file():
            raise FileNotFoundError(f"Workbook not found: {path}")
        try:
            workbook = load_openpyxl_workbook(path)
            values = load_openpyxl_workbook(path, data_only=True)
        except Exception as exc:
            raise WorkbookParseError(f"Failed to read workbook {path}: {exc}") from exc
        logger.debug("Loaded workbook %s (%d sheets).", path, len(workbook.sheetnames))
        return OpenpyxlHandle(workbook=workbook, values=values, source=path)

    def new_workbook(self, sheet_name: str = "Sheet1") -> OpenpyxlHandle:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = sheet_name
        return OpenpyxlHandle(workbook=workbook)

    def write_workbook(self, handle: OpenpyxlHandle, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            handle.workbook.save(path)
        except Exception as exc:
            raise WorkbookWriteError(
                f"Failed to write workbook {path}: {exc}"
            ) from exc
        logger.debug("Wrote workbook %s.", path)

    def sheet_names(self, handle: OpenpyxlHandle) -> list[str]:
        return list(handle.workbook.sheetnames)

    def get_sheet(self, handle: OpenpyxlHandle, name: str) -> Worksheet:
        return _get_sheet(handle.workbook, name)

    def add_sheet(self, handle: OpenpyxlHandle, name: str) -> None:
        if not name.strip():
            raise ValueError("Sheet name must not be empty.")
        if name in handle.workbook.sheetnames:
            raise SheetExistsError(name)
        handle.workbook.create_sheet(title=name)
        if handle.values is not None and name not in handle.values.sheetnames:
            handle.values.create_sheet(title=name)

    def remove_sheet(self, handle: OpenpyxlHandle, name: str) -> None:
        sheet = _get_sheet(handle.workbook, name)
        handle.workbook.remove(sheet)
        if handle.values is not None and name in handle.values.sheetnames:
            handle.values.remove(handle.values[name])

    def get_cell(
        self, handle: OpenpyxlHandle, sheet: str, coordinate: Coordinate
    ) -> CellData:
        cell = _read_cell(handle.workbook, sheet, coordinate)
        raw = cell.value
        if cell.data_type != "f":
            return CellData(value=raw, style=_cell_style(cell))
        cached = None
        if handle.values is not None and sheet in handle.values.sheetnames:
            cached = _read_cell(handle.values, sheet, coordinate).value
        return CellData(
            value=cached,
            formula=_normalize_formula(raw),
            style=_cell_style(cell),
        )

    def set_cell(
        self,
        handle: OpenpyxlHandle,
        sheet: str,
        coordinate: Coordinate,
        value: CellScalar,
        style: CellStyle | None = None,
    ) -> None:
        cell = _get_cell(handle.workbook, sheet, coordinate)
        cell.value = value
        if handle.values is not None and sheet in handle.values.sheetnames:
            is_formula = isinstance(value, str) and value.startswith("=")
            _get_cell(handle.values, sheet, coordinate).value = (
                None if is_formula else value
            )
        if style is not None:
            _apply_style(cell, style)


def _get_sheet(workbook: Workbook, name: str) -> Worksheet:
    if name not in workbook.sheetnames:
        raise SheetNotFoundError(name)
    return workbook[name]


def _get_cell(workbook: Workbook, sheet: str, coordinate: Coordinate) -> Cell:
    return _get_sheet(workbook, sheet).cell(row=coordinate.row, column=coordinate.column)


def _read_cell(workbook: Workbook, sheet: str, coordinate: Coordinate) -> Cell:
    """Return the stored cell, or a detached blank one without growing the sheet."""
    worksheet = _get_sheet(workbook, sheet)
    cell = worksheet._cells.get((coordinate.row, coordinate.column))  # noqa: SLF001
    if cell is None:
        return Cell(worksheet, row=coordinate.row, column=coordinate.column)
    return cell


def _normalize_formula(value: object) -> str:
    """Ensure formula string starts with '='."""
    text = str(getattr(value, "text", value))
    return text if text.startswith("=") else f"={text}"


def _extract_color(color: object) -> str | None:
    """Extract AARRGGBB text from an openpyxl color; theme colors yield None."""
    rgb = getattr(color, "rgb", None)
    if not isinstance(rgb, str):
        return None
    text = rgb.upper()
    return text if len(text) == 8 else None


def _cell_style(cell: Cell) -> CellStyle:
    font = cell.font
    fill = cell.fill
    alignment = cell.alignment
    fill_color = (
        _extract_color(fill.fgColor) if fill.fill_type == "solid" else None
    )
    return CellStyle(
        number_format=cell.number_format,
        bold=bool(font.b),
        italic=bool(font.i),
        font_size=font.sz,
        font_color=_extract_color(font.color),
        fill_color=fill_color,
        horizontal_align=alignment.horizontal,
        vertical_align=alignment.vertical,
        wrap_text=bool(alignment.wrap_text),
    )


def _apply_style(cell: Cell, style: CellStyle) -> None:
    """Apply the non-None fields of ``style`` to ``cell``."""
    if style.number_format is not None:
        cell.number_format = style.number_format
    if any(
        item is not None
        for item in (style.bold, style.italic, style.font_size, style.font_color)
    ):
        font = copy(cell.font)
        if style.bold is not None:
            font.bold = style.bold
        if style.italic is not None:
            font.italic = style.italic
        if style.font_size is not None:
            font.size = style.font_size
        if style.font_color is not None:
            font.color = Color(rgb=style.font_color)
        cell.font = font
    if style.fill_color is not None:
        cell.fill = PatternFill(
            fill_type="solid",
            start_color=style.fill_color,
            end_color=style.fill_color,
        )
    if any(
        item is not None
        for item in (style.horizontal_align, style.vertical_align, style.wrap_text)
    ):
        alignment = copy(cell.alignment)
        if style.horizontal_align is not None:
            alignment.horizontal = style.horizontal_align
        if style.vertical_align is not None:
            alignment.vertical = style.vertical_align
        if style.wrap_text is not None:
            alignment.wrap_text = style.wrap_text
        cell.alignment = alignment


__all__ = ["OpenpyxlBackend", "OpenpyxlHandle"]
