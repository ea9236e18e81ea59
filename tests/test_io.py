from __future__ import annotations

from pathlib import Path

import pytest

from exbook.io import PathPolicy


def test_ensure_allowed_resolves_relative_paths(tmp_path: Path) -> None:
    policy = PathPolicy(root=tmp_path)
    assert policy.ensure_allowed(Path("book.xlsx")) == (tmp_path / "book.xlsx").resolve()


def test_ensure_allowed_rejects_outside_root(tmp_path: Path) -> None:
    policy = PathPolicy(root=tmp_path / "root")
    with pytest.raises(ValueError, match="Workbook path is outside root"):
        policy.ensure_allowed(tmp_path / "other" / "book.xlsx")


def test_ensure_allowed_rejects_denied_glob(tmp_path: Path) -> None:
    policy = PathPolicy(root=tmp_path, deny_globs=["**/secret/*.xlsx"])
    with pytest.raises(ValueError, match="Workbook path is denied by policy"):
        policy.ensure_allowed(tmp_path / "data" / "secret" / "book.xlsx")
