"""MCP server integration for exbook."""

from __future__ import annotations

from .tools import (
    FetchToolInput,
    FetchToolOutput,
    ListSheetsToolInput,
    ListSheetsToolOutput,
    ResolveRefsToolInput,
    ResolveRefsToolOutput,
    run_fetch_tool,
    run_list_sheets_tool,
    run_resolve_refs_tool,
)

__all__ = [
    "FetchToolInput",
    "FetchToolOutput",
    "ListSheetsToolInput",
    "ListSheetsToolOutput",
    "ResolveRefsToolInput",
    "ResolveRefsToolOutput",
    "run_fetch_tool",
    "run_list_sheets_tool",
    "run_resolve_refs_tool",
]
