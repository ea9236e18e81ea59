from __future__ import annotations

from collections.abc import Sequence
import re
from typing import NamedTuple, TypeAlias

from exbook.errors import MalformedRange, MalformedReference

_A1_PATTERN = re.compile(r"([A-Za-z]+)([0-9]+)")
_COLUMN_LABEL_PATTERN = re.compile(r"[A-Za-z]+")


class Coordinate(NamedTuple):
    """1-based (column, row) position of a cell."""

    column: int
    row: int


CoordinateGrid: TypeAlias = list[list[Coordinate]]
MixedRef: TypeAlias = str | Sequence[int]


def split_a1(value: str) -> tuple[str, int]:
    """Split A1 notation into normalized (column_label, row_index)."""
    if not isinstance(value, str):
        raise MalformedReference(value, "expected a string")
    match = _A1_PATTERN.fullmatch(value)
    if match is None:
        raise MalformedReference(value)
    row = int(match.group(2), 10)
    if row < 1:
        raise MalformedReference(value, "row must be positive")
    return match.group(1).upper(), row


def column_label_to_index(label: str) -> int:
    """Convert Excel-style column label (A/AA) to 1-based index."""
    normalized = label.strip().upper()
    if not _COLUMN_LABEL_PATTERN.fullmatch(normalized):
        raise ValueError(f"Invalid column label: {label}")
    index = 0
    for char in normalized:
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index


def column_index_to_label(index: int) -> str:
    """Convert 1-based column index to Excel-style column label."""
    if index < 1:
        raise ValueError("Column index must be positive.")
    chunks: list[str] = []
    current = index
    while current > 0:
        current -= 1
        chunks.append(chr(ord("A") + (current % 26)))
        current //= 26
    return "".join(reversed(chunks))


def format_cell(coordinate: Coordinate | tuple[int, int]) -> str:
    """Format a (column, row) pair back into A1 notation."""
    column, row = coordinate
    return f"{column_index_to_label(column)}{row}"


def resolve_cell(ref: str) -> Coordinate:
    """Resolve a single A1 reference such as ``"AB27"`` to a coordinate.

    Args:
        ref: Column letters followed by row digits, case-insensitive.

    Returns:
        The matching 1-based coordinate.

    Raises:
        MalformedReference: If ``ref`` is not letters followed by digits.
    """
    label, row = split_a1(ref)
    return Coordinate(column_label_to_index(label), row)


def _split_range(range_ref: str) -> tuple[str, str]:
    if not isinstance(range_ref, str):
        raise MalformedRange(range_ref, "expected a string")
    parts = range_ref.split(":")
    if len(parts) != 2:
        raise MalformedRange(range_ref, "expected exactly one ':' separator")
    return parts[0], parts[1]


def _range_bounds(range_ref: str) -> tuple[int, int, int, int]:
    """Return (min_col, min_row, max_col, max_row) for an A1 range."""
    start_ref, end_ref = _split_range(range_ref)
    start = resolve_cell(start_ref)
    end = resolve_cell(end_ref)
    return (
        min(start.column, end.column),
        min(start.row, end.row),
        max(start.column, end.column),
        max(start.row, end.row),
    )


def resolve_range(range_ref: str) -> CoordinateGrid:
    """Expand an A1 range into a row-major grid of coordinates.

    Corners may be given in any order; the grid always runs top-to-bottom and
    left-to-right.

    Args:
        range_ref: Two cell references joined by ``:``.

    Returns:
        One list per row, each holding one coordinate per column.

    Raises:
        MalformedRange: If the separator is missing or repeated.
        MalformedReference: If either corner is malformed.
    """
    min_col, min_row, max_col, max_row = _range_bounds(range_ref)
    return [
        [Coordinate(column, row) for column in range(min_col, max_col + 1)]
        for row in range(min_row, max_row + 1)
    ]


def is_pair(value: object) -> bool:
    """Return True for a two-item sequence of non-bool ints such as ``(3, 4)``."""
    return (
        isinstance(value, Sequence)
        and not isinstance(value, (str, bytes, bytearray))
        and len(value) == 2
        and all(isinstance(item, int) and not isinstance(item, bool) for item in value)
    )


def _coerce_pair(value: Sequence[int]) -> Coordinate:
    if len(value) != 2:
        raise MalformedReference(value, "expected a (column, row) pair")
    column, row = value
    for part in (column, row):
        if isinstance(part, bool) or not isinstance(part, int) or part < 1:
            raise MalformedReference(value, "pair members must be positive integers")
    return Coordinate(column, row)


def resolve_mixed(refs: Sequence[MixedRef]) -> list[Coordinate | CoordinateGrid]:
    """Resolve references, ranges and (column, row) pairs in input order.

    Args:
        refs: Items that are A1 references, A1 ranges or numeric pairs.

    Returns:
        A coordinate for each reference or pair and a grid for each range.

    Raises:
        MalformedReference: If any item cannot be resolved.
    """
    resolved: list[Coordinate | CoordinateGrid] = []
    for ref in refs:
        if isinstance(ref, str):
            if ":" in ref:
                resolved.append(resolve_range(ref))
            else:
                resolved.append(resolve_cell(ref))
        elif isinstance(ref, Sequence) and not isinstance(ref, (bytes, bytearray)):
            resolved.append(_coerce_pair(ref))
        else:
            raise MalformedReference(ref, "unsupported reference type")
    return resolved


def normalize_range(value: str) -> str:
    """Validate an A1 range and return it as ``TOPLEFT:BOTTOMRIGHT``."""
    min_col, min_row, max_col, max_row = _range_bounds(value)
    return f"{format_cell((min_col, min_row))}:{format_cell((max_col, max_row))}"


def range_cell_count(range_ref: str) -> int:
    """Return the number of cells represented by an A1 range."""
    min_col, min_row, max_col, max_row = _range_bounds(range_ref)
    return (max_col - min_col + 1) * (max_row - min_row + 1)
