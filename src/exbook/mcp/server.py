from __future__ import annotations

import argparse
import functools
import importlib
import logging
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Literal, cast

import anyio
from pydantic import BaseModel, Field

from exbook.io import PathPolicy

from .tools import (
    FetchToolInput,
    FetchToolOutput,
    ListSheetsToolInput,
    ListSheetsToolOutput,
    ResolveRefsToolInput,
    ResolveRefsToolOutput,
    ToolRef,
    run_fetch_tool,
    run_list_sheets_tool,
    run_resolve_refs_tool,
)

if TYPE_CHECKING:  # pragma: no cover - typing only
    from mcp.server.fastmcp import FastMCP

logger = logging.getLogger(__name__)


class ServerConfig(BaseModel):
    """Configuration for the MCP server process."""

    root: Path = Field(..., description="Root directory for file access.")
    deny_globs: list[str] = Field(default_factory=list, description="Denied glob list.")
    log_level: str = Field(default="INFO", description="Logging level.")
    log_file: Path | None = Field(default=None, description="Optional log file path.")


def main(argv: list[str] | None = None) -> int:
    """Run the MCP server entrypoint.

    Args:
        argv: Optional CLI arguments for testing.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    config = _parse_args(argv)
    _configure_logging(config)
    try:
        run_server(config)
    except Exception as exc:  # pragma: no cover - surface runtime errors
        logger.error("MCP server failed: %s", exc)
        return 1
    return 0


def run_server(config: ServerConfig) -> None:
    """Start the MCP server."""
    _import_mcp()
    policy = PathPolicy(root=config.root, deny_globs=config.deny_globs)
    logger.info("MCP root: %s", policy.normalize_root())
    app = _create_app(policy)
    app.run()


def _parse_args(argv: list[str] | None) -> ServerConfig:
    """Parse CLI arguments into server config."""
    parser = argparse.ArgumentParser(description="exbook MCP server (stdio).")
    parser.add_argument("--root", type=Path, required=True, help="Workspace root.")
    parser.add_argument(
        "--deny-glob",
        action="append",
        default=[],
        help="Glob pattern to deny (can be specified multiple times).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    parser.add_argument("--log-file", type=Path, help="Optional log file path.")
    args = parser.parse_args(argv)
    return ServerConfig(
        root=args.root,
        deny_globs=list(args.deny_glob),
        log_level=args.log_level,
        log_file=args.log_file,
    )


def _configure_logging(config: ServerConfig) -> None:
    """Configure logging for the server process."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file is not None:
        handlers.append(logging.FileHandler(config.log_file))
    logging.basicConfig(
        level=config.log_level.upper(),
        handlers=handlers,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _import_mcp() -> ModuleType:
    """Import the MCP SDK module or raise a helpful error."""
    try:
        return importlib.import_module("mcp")
    except ModuleNotFoundError as exc:
        raise RuntimeError(
            "MCP SDK is not installed. Install with `pip install exbook[mcp]`."
        ) from exc


def _create_app(policy: PathPolicy) -> FastMCP:
    """Create the MCP FastMCP application.

    Args:
        policy: Path policy for filesystem access.

    Returns:
        FastMCP application instance.
    """
    from mcp.server.fastmcp import FastMCP

    app = FastMCP("exbook MCP", json_response=True)
    _register_tools(app, policy)
    return app


def _register_tools(app: FastMCP, policy: PathPolicy) -> None:
    """Register MCP tools for the server.

    Args:
        app: FastMCP application instance.
        policy: Path policy for filesystem access.
    """

    async def _resolve_refs_tool(refs: list[ToolRef]) -> ResolveRefsToolOutput:
        """Resolve A1 references ("B3"), ranges ("A1:C4") and [column, row] pairs.

        Args:
            refs: References to resolve, in order.

        Returns:
            1-based (column, row) coordinates, and row-major grids for ranges.
        """
        payload = ResolveRefsToolInput(refs=refs)
        return run_resolve_refs_tool(payload)

    resolve_tool = app.tool(name="exbook_resolve_refs")
    resolve_tool(_resolve_refs_tool)

    async def _list_sheets_tool(xlsx_path: str) -> ListSheetsToolOutput:
        """List sheet names of an Excel workbook.

        Args:
            xlsx_path: Path to the Excel workbook.

        Returns:
            Sheet names in workbook order.
        """
        payload = ListSheetsToolInput(xlsx_path=xlsx_path)
        work = functools.partial(run_list_sheets_tool, payload, policy=policy)
        result = cast(ListSheetsToolOutput, await anyio.to_thread.run_sync(work))
        return result

    sheets_tool = app.tool(name="exbook_list_sheets")
    sheets_tool(_list_sheets_tool)

    async def _fetch_tool(  # pylint: disable=redefined-builtin
        xlsx_path: str,
        refs: list[ToolRef],
        sheet: str | None = None,
        format: Literal["value", "formula"] = "value",  # noqa: A002
        max_cells: int = 10_000,
    ) -> FetchToolOutput:
        """Read cell values or formulas from an Excel workbook.

        Args:
            xlsx_path: Path to the Excel workbook.
            refs: Cells ("B3"), ranges ("A1:C4") or [column, row] pairs.
            sheet: Sheet name. Defaults to the first sheet.
            format: 'value' for cached values, 'formula' for formula text.
            max_cells: Maximum number of cells the refs may cover.

        Returns:
            Values in the order of refs; each range adds one list per row.
        """
        payload = FetchToolInput(
            xlsx_path=xlsx_path,
            sheet=sheet,
            refs=refs,
            format=format,
            max_cells=max_cells,
        )
        work = functools.partial(run_fetch_tool, payload, policy=policy)
        result = cast(FetchToolOutput, await anyio.to_thread.run_sync(work))
        return result

    fetch_tool = app.tool(name="exbook_fetch")
    fetch_tool(_fetch_tool)
