from __future__ import annotations

from pathlib import Path
import re
from typing import Any, Literal, Protocol, TypeAlias

from pydantic import BaseModel, Field, field_validator

from exbook.shared.a1 import Coordinate

_HEX_COLOR_PATTERN = re.compile(r"^#?(?:[0-9A-F]{6}|[0-9A-F]{8})$")

CellScalar: TypeAlias = str | int | float | bool | None
FetchFormat = Literal["value", "formula", "cell", "style"]

HorizontalAlignType = Literal[
    "general",
    "left",
    "center",
    "right",
    "fill",
    "justify",
    "centerContinuous",
    "distributed",
]
VerticalAlignType = Literal["top", "center", "bottom", "justify", "distributed"]


class CellStyle(BaseModel):
    """Subset of cell formatting exposed by the backend."""

    number_format: str | None = None
    bold: bool | None = None
    italic: bool | None = None
    font_size: float | None = Field(default=None, gt=0)
    font_color: str | None = Field(default=None, description="ARGB or RGB hex.")
    fill_color: str | None = Field(default=None, description="ARGB or RGB hex.")
    horizontal_align: HorizontalAlignType | None = None
    vertical_align: VerticalAlignType | None = None
    wrap_text: bool | None = None

    @field_validator("font_color", "fill_color")
    @classmethod
    def _validate_color(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return normalize_hex_color(value)


def normalize_hex_color(value: str) -> str:
    """Normalize ``RRGGBB``/``#AARRGGBB`` style input into ``AARRGGBB``.

    Raises:
        ValueError: If the value is not HEX color text.
    """
    text = value.strip().upper()
    if not _HEX_COLOR_PATTERN.match(text):
        raise ValueError(
            "Invalid color format. Use 'RRGGBB', 'AARRGGBB', "
            "'#RRGGBB', or '#AARRGGBB'."
        )
    raw = text.lstrip("#")
    return raw if len(raw) == 8 else f"FF{raw}"


class CellData(BaseModel):
    """Stored state of a single cell."""

    value: Any = None
    formula: str | None = None
    style: CellStyle = Field(default_factory=CellStyle)


class SpreadsheetBackend(Protocol):
    """Contract for libraries that own the on-disk workbook representation."""

    def read_workbook(self, path: Path) -> object:
        """Load a workbook file into an in-memory handle."""

    def new_workbook(self, sheet_name: str = "Sheet1") -> object:
        """Create an empty workbook holding a single sheet."""

    def write_workbook(self, handle: object, path: Path) -> None:
        """Persist a workbook handle to ``path``."""

    def sheet_names(self, handle: object) -> list[str]:
        """Return sheet names in workbook order."""

    def get_sheet(self, handle: object, name: str) -> object:
        """Return the library-native sheet object named ``name``."""

    def add_sheet(self, handle: object, name: str) -> None:
        """Append a sheet named ``name``."""

    def remove_sheet(self, handle: object, name: str) -> None:
        """Remove the sheet named ``name``."""

    def get_cell(self, handle: object, sheet: str, coordinate: Coordinate) -> CellData:
        """Read value, formula and style of one cell."""

    def set_cell(
        self,
        handle: object,
        sheet: str,
        coordinate: Coordinate,
        value: CellScalar,
        style: CellStyle | None = None,
    ) -> None:
        """Write a value or ``=``-prefixed formula, optionally styling the cell."""


__all__ = [
    "CellData",
    "CellScalar",
    "CellStyle",
    "FetchFormat",
    "SpreadsheetBackend",
    "normalize_hex_color",
]
