"""Workbook sessions over openpyxl with A1 reference resolution."""

from __future__ import annotations

from .backend import CellData, CellStyle, OpenpyxlBackend, SpreadsheetBackend
from .errors import (
    ExbookError,
    MalformedRange,
    MalformedReference,
    NoActiveSheetError,
    NoActiveWorkbookError,
    NoWorkbooksOpenError,
    SheetExistsError,
    SheetNotFoundError,
    WorkbookExistsError,
    WorkbookNotOpenError,
    WorkbookParseError,
    WorkbookWriteError,
)
from .io import PathPolicy
from .session import SessionConfig, WorkbookSession
from .shared.a1 import (
    Coordinate,
    CoordinateGrid,
    resolve_cell,
    resolve_mixed,
    resolve_range,
)

__all__ = [
    "CellData",
    "CellStyle",
    "Coordinate",
    "CoordinateGrid",
    "ExbookError",
    "MalformedRange",
    "MalformedReference",
    "NoActiveSheetError",
    "NoActiveWorkbookError",
    "NoWorkbooksOpenError",
    "OpenpyxlBackend",
    "PathPolicy",
    "SessionConfig",
    "SheetExistsError",
    "SheetNotFoundError",
    "SpreadsheetBackend",
    "WorkbookExistsError",
    "WorkbookNotOpenError",
    "WorkbookParseError",
    "WorkbookSession",
    "WorkbookWriteError",
    "resolve_cell",
    "resolve_mixed",
    "resolve_range",
]
