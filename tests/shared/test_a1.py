from __future__ import annotations

import pytest

from exbook.errors import MalformedRange, MalformedReference
from exbook.shared.a1 import (
    Coordinate,
    column_index_to_label,
    column_label_to_index,
    format_cell,
    is_pair,
    normalize_range,
    range_cell_count,
    resolve_cell,
    resolve_mixed,
    resolve_range,
    split_a1,
)


@pytest.mark.parametrize(
    ("ref", "expected"),
    [
        ("A1", (1, 1)),
        ("Z1", (26, 1)),
        ("AA1", (27, 1)),
        ("AZ1", (52, 1)),
        ("BA1", (53, 1)),
        ("A100", (1, 100)),
        ("XFD1048576", (16384, 1048576)),
    ],
)
def test_resolve_cell(ref: str, expected: tuple[int, int]) -> None:
    assert resolve_cell(ref) == expected


def test_resolve_cell_is_case_insensitive() -> None:
    assert resolve_cell("a1") == resolve_cell("A1")
    assert resolve_cell("aB27") == Coordinate(column=28, row=27)


def test_resolve_cell_accepts_leading_zero_row() -> None:
    assert resolve_cell("C007") == (3, 7)


def test_resolve_cell_is_repeatable() -> None:
    assert resolve_cell("BA12") == resolve_cell("BA12")


@pytest.mark.parametrize(
    "ref", ["1A", "", "A", "A1B", "A0", " A1", "A-1", "Ä1", "A1\n"]
)
def test_resolve_cell_rejects_malformed(ref: str) -> None:
    with pytest.raises(MalformedReference, match="Invalid cell reference"):
        resolve_cell(ref)


def test_resolve_cell_rejects_non_string() -> None:
    with pytest.raises(MalformedReference):
        resolve_cell(11)  # type: ignore[arg-type]


def test_resolve_range_grid_shape() -> None:
    assert resolve_range("A1:B2") == [[(1, 1), (2, 1)], [(1, 2), (2, 2)]]


def test_resolve_range_single_cell() -> None:
    assert resolve_range("A1:A1") == [[(1, 1)]]


def test_resolve_range_normalizes_reversed_corners() -> None:
    assert resolve_range("B10:A1") == resolve_range("A1:B10")
    assert resolve_range("A2:B1") == resolve_range("B2:A1")
    grid = resolve_range("B10:A1")
    assert len(grid) == 10
    assert all(len(row) == 2 for row in grid)


@pytest.mark.parametrize("ref", ["A1", "A1:B2:C3", "A1::B2"])
def test_resolve_range_rejects_bad_separator(ref: str) -> None:
    with pytest.raises(MalformedRange, match="Invalid range reference"):
        resolve_range(ref)


def test_resolve_range_rejects_malformed_corner() -> None:
    with pytest.raises(MalformedReference, match="Invalid cell reference"):
        resolve_range("1A:B2")


def test_resolve_range_rejects_trailing_newline() -> None:
    with pytest.raises(MalformedReference):
        resolve_range("A1:B1\n")


def test_resolve_mixed_preserves_order() -> None:
    result = resolve_mixed(["B2", "A1:B1", (3, 4), [5, 6]])
    assert result == [
        (2, 2),
        [[(1, 1), (2, 1)]],
        (3, 4),
        (5, 6),
    ]
    assert isinstance(result[2], Coordinate)


@pytest.mark.parametrize(
    "ref",
    [(0, 1), (1, -2), (1,), (1, 2, 3), (True, 1), 7, b"A1", bytearray(b"A1")],
)
def test_resolve_mixed_rejects_bad_pairs(ref: object) -> None:
    with pytest.raises(MalformedReference):
        resolve_mixed([ref])  # type: ignore[list-item]


def test_is_pair() -> None:
    assert is_pair((3, 4))
    assert is_pair([3, 4])
    assert not is_pair("A1")
    assert not is_pair(b"A1")
    assert not is_pair((True, 1))
    assert not is_pair((1, 2, 3))


def test_column_roundtrip() -> None:
    assert column_label_to_index("A") == 1
    assert column_label_to_index("AA") == 27
    assert column_index_to_label(1) == "A"
    assert column_index_to_label(27) == "AA"
    assert column_index_to_label(702) == "ZZ"
    assert column_index_to_label(703) == "AAA"


def test_column_index_to_label_rejects_zero() -> None:
    with pytest.raises(ValueError, match="Column index must be positive"):
        column_index_to_label(0)


def test_split_a1() -> None:
    assert split_a1("b12") == ("B", 12)


def test_format_cell() -> None:
    assert format_cell(Coordinate(28, 27)) == "AB27"


def test_normalize_range() -> None:
    assert normalize_range("d6:b4") == "B4:D6"


def test_range_cell_count() -> None:
    assert range_cell_count("A1:C3") == 9
    assert range_cell_count("C3:A1") == 9
