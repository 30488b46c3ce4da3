"""Idempotent file output for generated sources and resources."""

from __future__ import annotations

from pathlib import Path
from typing import List


class OutputWriteError(RuntimeError):
    """Raised when a generated file cannot be written."""


class OutputWriter:
    """Writes files only when their content changes.

    Unchanged files keep their timestamps so incremental builds do not
    recompile them. With ``dry_run`` the writer only records what would change.
    """

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run
        self.written: List[Path] = []

    def update(self, path: Path, content: str) -> bool:
        """Write ``content`` to ``path`` if it differs; return whether a write happened."""
        data = content.encode("utf-8")
        try:
            if path.is_file() and path.read_bytes() == data:
                return False
            if not self.dry_run:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(data)
        except OSError as exc:
            raise OutputWriteError(f"Cannot write {path}: {exc}") from exc
        self.written.append(path)
        return True


__all__ = ["OutputWriteError", "OutputWriter"]
