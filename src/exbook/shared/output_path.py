from __future__ import annotations

from pathlib import Path
from typing import Literal

from exbook.io import PathPolicy

OnConflictPolicy = Literal["overwrite", "skip", "rename"]


def workbook_path(
    directory: Path,
    name: str,
    extension: str,
    *,
    policy: PathPolicy | None = None,
) -> Path:
    """Build ``<directory>/<name>.<extension>`` and validate it against policy."""
    path = directory / normalize_workbook_name(name, extension)
    if policy is not None:
        return policy.ensure_allowed(path)
    return path


def normalize_workbook_name(name: str, extension: str) -> str:
    """Return ``<name>.<extension>``; an empty extension leaves the name as is."""
    if not name.strip():
        raise ValueError("Workbook name must not be empty.")
    if not extension.strip("."):
        return name
    return f"{name}.{extension.lstrip('.')}"


def apply_conflict_policy(
    output_path: Path, on_conflict: OnConflictPolicy
) -> tuple[Path, str | None, bool]:
    """Apply output conflict policy to a resolved output path.

    Returns:
        Tuple of (path to write, warning message, skipped flag).
    """
    if not output_path.exists():
        return output_path, None, False
    if on_conflict == "skip":
        return (
            output_path,
            f"Output exists; skipping write: {output_path.name}",
            True,
        )
    if on_conflict == "rename":
        renamed = next_available_path(output_path)
        return (
            renamed,
            f"Output exists; renamed to: {renamed.name}",
            False,
        )
    return output_path, None, False


def next_available_path(path: Path) -> Path:
    """Return the next available path by appending a numeric suffix."""
    if not path.exists():
        return path
    stem = path.stem
    suffix = path.suffix
    for idx in range(1, 10_000):
        candidate = path.with_name(f"{stem}_{idx}{suffix}")
        if not candidate.exists():
            return candidate
    raise RuntimeError(f"Failed to resolve unique path for {path}")
