"""Builds the csimple.properties resource listing generated classes."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from .writer import OutputWriter

GENERATED_MSG = "Generated by camel build tools - do NOT edit this file!"
RESOURCE_FILE = "META-INF/services/org/apache/camel/csimple.properties"


class ManifestBuilder:
    """Serializes generated identities for runtime discovery."""

    def __init__(self, writer: OutputWriter | None = None) -> None:
        self.writer = writer or OutputWriter()

    @staticmethod
    def entries(identities: Iterable[str]) -> List[str]:
        """Return the sorted, duplicate-free identities."""
        return sorted(set(identities))

    def render(self, identities: Iterable[str]) -> Optional[str]:
        """Return the manifest text, or None when there is nothing to list."""
        entries = self.entries(identities)
        if not entries:
            return None
        lines = [f"# {GENERATED_MSG}", *entries]
        return "\n".join(lines) + "\n"

    def write(self, output_resource_dir: Path, identities: Iterable[str]) -> Optional[Path]:
        """Write the manifest below ``output_resource_dir``.

        Returns the manifest path, or None when no identities were given (in
        which case no file is created).
        """
        content = self.render(identities)
        if content is None:
            return None
        path = output_resource_dir / RESOURCE_FILE
        self.writer.update(path, content)
        return path


__all__ = ["GENERATED_MSG", "ManifestBuilder", "RESOURCE_FILE"]
