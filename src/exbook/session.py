from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, Field

from .backend.base import CellData, FetchFormat, SpreadsheetBackend
from .backend.openpyxl_backend import OpenpyxlBackend
from .errors import (
    MalformedReference,
    NoActiveSheetError,
    NoActiveWorkbookError,
    NoWorkbooksOpenError,
    SheetNotFoundError,
    WorkbookExistsError,
    WorkbookNotOpenError,
)
from .io import PathPolicy
from .shared.a1 import Coordinate, MixedRef, is_pair, resolve_mixed
from .shared.output_path import OnConflictPolicy, apply_conflict_policy, workbook_path

logger = logging.getLogger(__name__)

_FETCH_FORMATS: frozenset[str] = frozenset({"value", "formula", "cell", "style"})
DEFAULT_SHEET_NAME = "Sheet1"


class SessionConfig(BaseModel):
    """Defaults applied by a workbook session."""

    directory: Path = Field(
        default=Path("."), description="Fallback directory for open/save/delete."
    )
    extension: str = Field(default="xlsx", description="Workbook file extension.")
    on_conflict: OnConflictPolicy = Field(
        default="overwrite", description="Policy when a save target exists."
    )


class WorkbookSession:
    """Set of open workbooks with an active workbook and sheet selection.

    Each session is independent; nothing is shared between instances. Failures
    raise the errors in :mod:`exbook.errors` after being logged.
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        backend: SpreadsheetBackend | None = None,
        policy: PathPolicy | None = None,
    ) -> None:
        self.config = config or SessionConfig()
        self.backend: SpreadsheetBackend = backend or OpenpyxlBackend()
        self.policy = policy
        self.workbooks: dict[str, Any] = {}
        self.active_workbook: str | None = None
        self.active_sheet: str | None = None
        self.input_dir: Path | None = None

    @property
    def is_open(self) -> bool:
        return bool(self.workbooks)

    # file management

    def open(
        self,
        names: str | Sequence[str],
        directory: str | Path | None = None,
        extension: str | None = None,
    ) -> list[str]:
        """Load workbooks ``<directory>/<name>.<extension>`` into the session.

        When a single name is requested and it is the only open workbook, it
        becomes active together with its first sheet.

        Returns:
            Names that were opened.

        Raises:
            FileNotFoundError: If a workbook file does not exist.
            WorkbookParseError: If a workbook file cannot be read.
        """
        requested = _as_name_list(names)
        target_dir = Path(directory) if directory is not None else self.config.directory
        self.input_dir = target_dir
        for name in requested:
            path = self._path(target_dir, name, extension)
            try:
                self.workbooks[name] = self.backend.read_workbook(path)
            except Exception as exc:
                logger.error("Opening failed: %s", exc)
                raise
            logger.info("Opened: %s", path.name)
        if len(requested) == 1 and len(self.workbooks) == 1:
            self.use_workbook(requested[0])
        return requested

    def save(
        self, directory: str | Path | None = None, extension: str | None = None
    ) -> Path | None:
        """Write the active workbook in place or into ``directory``.

        Returns:
            Written path, or None when the conflict policy skipped the write.
        """
        name = self._require_active_workbook("save")
        return self._write(name, name, directory, extension)

    def save_as(
        self,
        names: str | Sequence[str],
        directory: str | Path | None = None,
        extension: str | None = None,
    ) -> list[Path]:
        """Write the active workbook once under each of ``names``."""
        source = self._require_active_workbook("save")
        written: list[Path] = []
        for name in _as_name_list(names):
            path = self._write(source, name, directory, extension)
            if path is not None:
                written.append(path)
        return written

    def save_all(
        self, directory: str | Path | None = None, extension: str | None = None
    ) -> list[Path]:
        """Write every open workbook under its own name."""
        self._require_open()
        written: list[Path] = []
        for name in list(self.workbooks):
            path = self._write(name, name, directory, extension)
            if path is not None:
                written.append(path)
        return written

    def delete(
        self,
        name: str | None = None,
        *,
        close: bool = False,
        directory: str | Path | None = None,
        extension: str | None = None,
    ) -> Path:
        """Delete a workbook file, optionally closing it in the session first.

        Args:
            name: Workbook to delete; defaults to the active workbook.
            close: Also drop the workbook from the session when it is open.
            directory: Directory holding the file; defaults to the input dir.
            extension: File extension override.

        Returns:
            Path of the removed file.
        """
        target = name or self.active_workbook
        if not target:
            logger.error("No workbook to delete.")
            raise NoActiveWorkbookError("delete")
        path = self._path(self._resolve_dir(directory), target, extension)
        if close and target in self.workbooks:
            self.close(target)
        try:
            path.unlink()
        except FileNotFoundError:
            logger.error("Failed to delete workbook: %s", path)
            raise
        logger.info("Deleted workbook: %s", target)
        return path

    def close(self, name: str | None = None) -> str:
        """Drop a workbook (the active one by default) from the session."""
        self._require_open()
        target = name or self.active_workbook
        if not target:
            logger.error("No workbook selected to close.")
            raise NoActiveWorkbookError("close")
        if target not in self.workbooks:
            logger.error("Workbook %s not open.", target)
            raise WorkbookNotOpenError(target)
        del self.workbooks[target]
        logger.info("Closed: %s", target)
        if target == self.active_workbook:
            self.active_workbook = None
            self.active_sheet = None
        self._reset_if_empty()
        return target

    def close_all(self) -> list[str]:
        """Drop every workbook and clear the selection."""
        self._require_open()
        self.active_workbook = None
        self.active_sheet = None
        closed = list(self.workbooks)
        for name in closed:
            del self.workbooks[name]
            logger.info("Closed: %s", name)
        self._reset_if_empty()
        return closed

    # workbooks

    def list_workbooks(self) -> list[str]:
        if not self.workbooks:
            logger.warning("No workbooks open.")
        return list(self.workbooks)

    def add_workbook(self, name: str, *, use: bool = False) -> Any:
        """Create an empty workbook with one sheet and register it as ``name``."""
        if name in self.workbooks:
            logger.error("Workbook %s already open.", name)
            raise WorkbookExistsError(name)
        handle = self.backend.new_workbook(DEFAULT_SHEET_NAME)
        self.workbooks[name] = handle
        logger.info("Added workbook: %s", name)
        if use:
            self.active_workbook = name
            self.active_sheet = DEFAULT_SHEET_NAME
        return handle

    def use_workbook(self, name: str) -> None:
        """Select ``name`` as active workbook, with its first sheet."""
        self._require_open()
        if name not in self.workbooks:
            logger.error("Workbook %s not open.", name)
            raise WorkbookNotOpenError(name)
        if name == self.active_workbook:
            logger.info("Already using workbook: %s", name)
            return
        self.active_workbook = name
        sheets = self.backend.sheet_names(self.workbooks[name])
        self.active_sheet = sheets[0] if sheets else None
        if self.active_sheet is None:
            logger.info("Using workbook %s", name)
        else:
            logger.info("Using workbook %s & sheet %s", name, self.active_sheet)

    def get_workbook(self, name: str | None = None) -> Any:
        """Return the backend handle of ``name`` or the active workbook."""
        return self.workbooks[self._workbook_name(name, "return")]

    def active_workbook_name(self) -> str:
        return self._require_active_workbook("select")

    # sheets

    def list_sheets(self, workbook: str | None = None) -> list[str]:
        target = self._workbook_name(workbook, "examine")
        return self.backend.sheet_names(self.workbooks[target])

    def add_sheet(
        self, name: str, workbook: str | None = None, *, use: bool = False
    ) -> None:
        """Append sheet ``name``; with ``use`` it also becomes the selection."""
        target = self._workbook_name(workbook, "add a sheet to")
        try:
            self.backend.add_sheet(self.workbooks[target], name)
        except Exception as exc:
            logger.error("Failed adding sheet: %s", exc)
            raise
        logger.info("Added sheet %s to %s", name, target)
        if use:
            self.active_workbook = target
            self.active_sheet = name
            logger.info("Using sheet: %s", name)

    def use_sheet(self, name: str) -> None:
        active = self._require_active_workbook("select")
        if name not in self.backend.sheet_names(self.workbooks[active]):
            logger.error("Sheet %s does not exist.", name)
            raise SheetNotFoundError(name)
        self.active_sheet = name
        logger.info("Using sheet: %s", name)

    def delete_sheet(self, name: str, workbook: str | None = None) -> None:
        target = self._workbook_name(workbook, "delete a sheet from")
        try:
            self.backend.remove_sheet(self.workbooks[target], name)
        except SheetNotFoundError:
            logger.error("Sheet %s not found.", name)
            raise
        logger.info("Removed sheet: %s", name)
        if target == self.active_workbook and name == self.active_sheet:
            self.active_sheet = None
            logger.info("Deleted active sheet.")

    def get_sheet(self, name: str | None = None, workbook: str | None = None) -> Any:
        """Return the backend-native sheet object."""
        sheet = name or self.active_sheet
        if not sheet:
            logger.error("No sheet to return.")
            raise NoActiveSheetError()
        target = self._workbook_name(workbook, "return a sheet from")
        return self.backend.get_sheet(self.workbooks[target], sheet)

    def active_sheet_name(self) -> str:
        if not self.active_sheet:
            logger.error("No sheet selected.")
            raise NoActiveSheetError()
        return self.active_sheet

    # fetching data

    def fetch(
        self, ref: str | Sequence[int], format: FetchFormat = "value"  # noqa: A002
    ) -> Any:
        """Read one cell of the active sheet.

        Args:
            ref: A1 reference such as ``"B3"`` or a ``(column, row)`` pair.
            format: ``value`` for the (cached) value, ``formula`` for the
                formula text falling back to the value, ``cell`` for the full
                :class:`CellData`, ``style`` for the :class:`CellStyle`.

        Raises:
            NoActiveSheetError: If no sheet is selected.
            MalformedReference: If ``ref`` is not a single cell.
            ValueError: If ``format`` is unknown.
        """
        _ensure_format(format)
        self._require_active_sheet()
        (resolved,) = resolve_mixed([ref])
        if not isinstance(resolved, Coordinate):
            raise MalformedReference(ref, "expected a single cell")
        return self._fetch_coordinate(resolved, format)

    def fetch_range(
        self,
        refs: MixedRef | Sequence[MixedRef],
        format: FetchFormat = "value",  # noqa: A002
    ) -> list[Any]:
        """Read cells, ranges and pairs from the active sheet in input order.

        A lone reference or pair is treated as a one-item list. Each single
        cell contributes one entry; each range contributes one list per row.
        """
        _ensure_format(format)
        self._require_active_sheet()
        items = _as_ref_list(refs)
        results: list[Any] = []
        for resolved in resolve_mixed(items):
            if isinstance(resolved, Coordinate):
                results.append(self._fetch_coordinate(resolved, format))
                continue
            for row in resolved:
                results.append(
                    [self._fetch_coordinate(coordinate, format) for coordinate in row]
                )
        return results

    # internals

    def _fetch_coordinate(self, coordinate: Coordinate, format: str) -> Any:  # noqa: A002
        active = cast(str, self.active_workbook)
        sheet = cast(str, self.active_sheet)
        data: CellData = self.backend.get_cell(self.workbooks[active], sheet, coordinate)
        if format == "cell":
            return data
        if format == "style":
            return data.style
        if format == "formula":
            return data.formula if data.formula is not None else data.value
        return data.value

    def _write(
        self,
        source: str,
        name: str,
        directory: str | Path | None,
        extension: str | None,
    ) -> Path | None:
        path = self._path(self._resolve_dir(directory), name, extension)
        target, warning, skipped = apply_conflict_policy(path, self.config.on_conflict)
        if warning:
            logger.warning(warning)
        if skipped:
            return None
        try:
            self.backend.write_workbook(self.workbooks[source], target)
        except Exception as exc:
            logger.error("Saving %s failed: %s", target.name, exc)
            raise
        logger.info("Saved: %s", target.name)
        return target

    def _path(self, directory: Path, name: str, extension: str | None) -> Path:
        return workbook_path(
            directory,
            name,
            extension or self.config.extension,
            policy=self.policy,
        )

    def _resolve_dir(self, directory: str | Path | None) -> Path:
        if directory is not None:
            return Path(directory)
        return self.input_dir or self.config.directory

    def _workbook_name(self, name: str | None, action: str) -> str:
        target = name or self.active_workbook
        if not target:
            logger.error("No workbook to %s.", action)
            raise NoActiveWorkbookError(action)
        if target not in self.workbooks:
            logger.error("Workbook %s not open.", target)
            raise WorkbookNotOpenError(target)
        return target

    def _require_open(self) -> None:
        if not self.workbooks:
            logger.error("No workbooks open.")
            raise NoWorkbooksOpenError()

    def _require_active_workbook(self, action: str) -> str:
        if not self.active_workbook:
            logger.error("No workbook selected.")
            raise NoActiveWorkbookError(action)
        return self.active_workbook

    def _require_active_sheet(self) -> None:
        if not self.active_workbook or not self.active_sheet:
            logger.error("No active sheet selected.")
            raise NoActiveSheetError()

    def _reset_if_empty(self) -> None:
        if not self.workbooks:
            self.input_dir = None
            logger.info("No workbooks left open.")


def _ensure_format(format: str) -> None:  # noqa: A002
    if format not in _FETCH_FORMATS:
        raise ValueError(f"Unsupported fetch format: {format}")


def _as_name_list(names: str | Sequence[str]) -> list[str]:
    if isinstance(names, str):
        return [names]
    return list(names)


def _as_ref_list(refs: MixedRef | Sequence[MixedRef]) -> list[MixedRef]:
    if isinstance(refs, str) or is_pair(refs):
        return [cast(MixedRef, refs)]
    return list(cast(Sequence[MixedRef], refs))


__all__ = ["DEFAULT_SHEET_NAME", "SessionConfig", "WorkbookSession"]
