from __future__ import annotations

from .base import CellData, CellScalar, CellStyle, FetchFormat, SpreadsheetBackend
from .openpyxl_backend import OpenpyxlBackend, OpenpyxlHandle

__all__ = [
    "CellData",
    "CellScalar",
    "CellStyle",
    "FetchFormat",
    "OpenpyxlBackend",
    "OpenpyxlHandle",
    "SpreadsheetBackend",
]
