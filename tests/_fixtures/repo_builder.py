"""Helper utilities for constructing temporary Camel projects in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from csimplegen.config import ProjectSettings, load_settings
from csimplegen.pipeline import GenerateOutcome, GeneratePipeline


class RepoBuilder:
    """Utility for writing files into a throwaway project and generating it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()
        self._pipeline = GeneratePipeline()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def settings(self) -> ProjectSettings:
        """Return the project settings as the CLI would load them."""
        return load_settings(self.root)

    def generate(self, *, dry_run: bool = False) -> GenerateOutcome:
        """Run the generate pipeline against the project."""
        return self._pipeline.run(self.settings(), dry_run=dry_run)

    def generated(self, relative: str) -> Path:
        """Return a path below the generated sources directory."""
        return self.root / "src" / "generated" / "java" / relative

    def manifest(self) -> Path:
        """Return the path of the generated csimple.properties resource."""
        return (
            self.root
            / "src"
            / "generated"
            / "resources"
            / "META-INF"
            / "services"
            / "org"
            / "apache"
            / "camel"
            / "csimple.properties"
        )

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


__all__ = ["RepoBuilder"]
