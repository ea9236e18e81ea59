from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class PathPolicy(BaseModel):
    """Confines the workbook files a session may open, save or delete.

    Every workbook path must resolve under ``root`` and must not match any of
    ``deny_globs``.
    """

    root: Path = Field(..., description="Directory workbook paths must stay under.")
    deny_globs: list[str] = Field(
        default_factory=list, description="Glob patterns for forbidden workbooks."
    )

    def normalize_root(self) -> Path:
        """Return the resolved root path."""
        return self.root.resolve()

    def ensure_allowed(self, path: Path) -> Path:
        """Validate a workbook path before it is read, written or deleted.

        Args:
            path: Workbook path. Relative paths are taken from the root.

        Returns:
            Resolved workbook path if allowed.

        Raises:
            ValueError: If the workbook lies outside the root or is denied by glob.
        """
        root = self.normalize_root()
        candidate = path if path.is_absolute() else root / path
        resolved = candidate.resolve()
        if resolved != root and root not in resolved.parents:
            raise ValueError(
                f"Workbook path is outside root. resolved={resolved}, root={root}"
            )
        if self._is_denied(resolved, root):
            raise ValueError(f"Workbook path is denied by policy: {resolved}")
        return resolved

    def _is_denied(self, path: Path, root: Path) -> bool:
        try:
            rel = path.relative_to(root)
        except ValueError:
            return True
        for pattern in self.deny_globs:
            if rel.match(pattern) or path.match(pattern):
                return True
        return False
