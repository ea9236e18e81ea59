from __future__ import annotations

from .a1 import (
    Coordinate,
    CoordinateGrid,
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
from .output_path import (
    OnConflictPolicy,
    apply_conflict_policy,
    next_available_path,
    normalize_workbook_name,
    workbook_path,
)

__all__ = [
    "Coordinate",
    "CoordinateGrid",
    "OnConflictPolicy",
    "apply_conflict_policy",
    "column_index_to_label",
    "column_label_to_index",
    "format_cell",
    "is_pair",
    "next_available_path",
    "normalize_range",
    "normalize_workbook_name",
    "range_cell_count",
    "resolve_cell",
    "resolve_mixed",
    "resolve_range",
    "split_a1",
    "workbook_path",
]
