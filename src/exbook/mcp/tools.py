from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from exbook.core.workbook import openpyxl_workbook
from exbook.io import PathPolicy
from exbook.session import SessionConfig, WorkbookSession
from exbook.shared.a1 import (
    Coordinate,
    format_cell,
    normalize_range,
    range_cell_count,
    resolve_mixed,
)

logger = logging.getLogger(__name__)

ToolRef = str | list[int]


class ResolvedRef(BaseModel):
    """Resolution of one reference item."""

    ref: str
    kind: Literal["cell", "range"]
    coordinate: tuple[int, int] | None = None
    grid: list[list[tuple[int, int]]] | None = None


class ResolveRefsToolInput(BaseModel):
    """MCP tool input for reference resolution."""

    refs: list[ToolRef] = Field(min_length=1)


class ResolveRefsToolOutput(BaseModel):
    """MCP tool output for reference resolution."""

    items: list[ResolvedRef] = Field(default_factory=list)


class ListSheetsToolInput(BaseModel):
    """MCP tool input for listing sheets."""

    xlsx_path: str


class ListSheetsToolOutput(BaseModel):
    """MCP tool output for listing sheets."""

    book_name: str
    sheets: list[str] = Field(default_factory=list)


class FetchToolInput(BaseModel):
    """MCP tool input for fetching cell values."""

    xlsx_path: str
    sheet: str | None = None
    refs: list[ToolRef] = Field(min_length=1)
    format: Literal["value", "formula"] = "value"  # noqa: A003
    max_cells: int = Field(default=10_000, ge=1)


class FetchToolOutput(BaseModel):
    """MCP tool output for fetching cell values."""

    book_name: str
    sheet_name: str
    values: list[Any] = Field(default_factory=list)


def run_resolve_refs_tool(payload: ResolveRefsToolInput) -> ResolveRefsToolOutput:
    """Resolve A1 references, ranges and pairs into numeric coordinates."""
    items: list[ResolvedRef] = []
    for ref, resolved in zip(payload.refs, resolve_mixed(payload.refs), strict=True):
        if isinstance(resolved, Coordinate):
            items.append(
                ResolvedRef(
                    ref=ref if isinstance(ref, str) else format_cell(resolved),
                    kind="cell",
                    coordinate=(resolved.column, resolved.row),
                )
            )
            continue
        items.append(
            ResolvedRef(
                ref=normalize_range(str(ref)),
                kind="range",
                grid=[[(item.column, item.row) for item in row] for row in resolved],
            )
        )
    return ResolveRefsToolOutput(items=items)


def run_list_sheets_tool(
    payload: ListSheetsToolInput, *, policy: PathPolicy | None = None
) -> ListSheetsToolOutput:
    """List sheet names of a workbook file.

    Args:
        payload: Tool input payload.
        policy: Optional path policy for access control.

    Returns:
        Book name and sheet names in workbook order.
    """
    path = _resolve_input_path(Path(payload.xlsx_path), policy=policy)
    with openpyxl_workbook(path, data_only=True, read_only=True) as workbook:
        sheets = list(workbook.sheetnames)
    return ListSheetsToolOutput(book_name=path.stem, sheets=sheets)


def run_fetch_tool(
    payload: FetchToolInput, *, policy: PathPolicy | None = None
) -> FetchToolOutput:
    """Fetch values or formulas from one sheet of a workbook file.

    Args:
        payload: Tool input payload.
        policy: Optional path policy for access control.

    Returns:
        Fetched values in the order of ``payload.refs``; ranges contribute one
        list per row.
    """
    cell_count = _requested_cell_count(payload.refs)
    if cell_count > payload.max_cells:
        raise ValueError(
            "Requested refs exceed max_cells. "
            f"cells={cell_count}, max_cells={payload.max_cells}"
        )
    path = _resolve_input_path(Path(payload.xlsx_path), policy=policy)
    session = WorkbookSession(
        SessionConfig(directory=path.parent, extension=path.suffix.lstrip(".")),
        policy=policy,
    )
    session.open(path.stem)
    try:
        if payload.sheet is not None:
            session.use_sheet(payload.sheet)
        values = session.fetch_range(list(payload.refs), payload.format)
        return FetchToolOutput(
            book_name=session.active_workbook_name(),
            sheet_name=session.active_sheet_name(),
            values=values,
        )
    finally:
        session.close_all()


def _requested_cell_count(refs: list[ToolRef]) -> int:
    """Count the cells a fetch would read; ranges count every cell they cover."""
    return sum(
        range_cell_count(ref) if isinstance(ref, str) and ":" in ref else 1
        for ref in refs
    )


def _resolve_input_path(path: Path, *, policy: PathPolicy | None) -> Path:
    """Resolve and validate a workbook input path."""
    resolved = policy.ensure_allowed(path) if policy else path.resolve()
    if not resolved.exists():
        raise FileNotFoundError(f"Input file not found: {resolved}")
    if not resolved.is_file():
        raise ValueError(f"Input path is not a file: {resolved}")
    logger.debug("Resolved input path %s", resolved)
    return resolved
