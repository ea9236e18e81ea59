from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from pathlib import Path
import warnings

from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook

logger = logging.getLogger(__name__)

_IGNORED_OPENPYXL_WARNINGS = (
    "Unknown extension is not supported and will be removed",
    "Conditional Formatting extension is not supported and will be removed",
    "Cannot parse header or footer so it will be ignored",
)


def load_openpyxl_workbook(
    file_path: Path, *, data_only: bool = False, read_only: bool = False
) -> Workbook:
    """Load a workbook with openpyxl, silencing known harmless warnings.

    Args:
        file_path: Workbook path.
        data_only: Whether to read cached formula results instead of formulas.
        read_only: Whether to open in read-only mode.

    Returns:
        openpyxl workbook instance. The caller owns closing it.
    """
    with warnings.catch_warnings():
        for message in _IGNORED_OPENPYXL_WARNINGS:
            warnings.filterwarnings(
                "ignore",
                message=message,
                category=UserWarning,
                module="openpyxl",
            )
        return load_workbook(file_path, data_only=data_only, read_only=read_only)


@contextmanager
def openpyxl_workbook(
    file_path: Path, *, data_only: bool, read_only: bool
) -> Iterator[Workbook]:
    """Open an openpyxl workbook and ensure it is closed.

    Args:
        file_path: Workbook path.
        data_only: Whether to read formula results.
        read_only: Whether to open in read-only mode.

    Yields:
        openpyxl workbook instance.
    """
    wb = load_openpyxl_workbook(file_path, data_only=data_only, read_only=read_only)
    try:
        yield wb
    finally:
        try:
            wb.close()
        except Exception as exc:  # pragma: no cover - close failures are not actionable
            logger.debug("Ignoring workbook close failure for %s: %s", file_path, exc)
