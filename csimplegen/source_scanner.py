"""Route source discovery with include/exclude filtering."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from re import Pattern
from typing import Dict, Iterator, List, Optional, Sequence

from .logging import get_logger
from .models import Dialect

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".gradle",
    ".mvn",
    "node_modules",
    "__pycache__",
}

_DIALECT_BY_SUFFIX = {
    ".java": Dialect.CODE,
    ".xml": Dialect.DOCUMENT,
}


@dataclass
class FilePattern:
    """A single include/exclude entry: a filename glob or a regular expression."""

    raw: str
    regex: Optional[Pattern[str]]

    @classmethod
    def parse(cls, raw: str) -> "FilePattern":
        try:
            regex: Optional[Pattern[str]] = re.compile(raw)
        except re.error:
            regex = None
        return cls(raw=raw, regex=regex)

    def matches(self, candidates: Sequence[str]) -> bool:
        for candidate in candidates:
            if candidate == self.raw or fnmatchcase(candidate, self.raw):
                return True
            if self.regex is not None and self.regex.fullmatch(candidate):
                return True
        return False


def compile_patterns(patterns: Sequence[str] | None) -> List[FilePattern]:
    """Turn comma separated entries into patterns, skipping blanks."""
    compiled: List[FilePattern] = []
    for entry in patterns or ():
        for part in entry.split(","):
            part = part.strip()
            if part:
                compiled.append(FilePattern.parse(part))
    return compiled


@dataclass(frozen=True)
class SourceFile:
    """A candidate file and its location relative to the source root."""

    path: Path
    relative: str
    dialect: Dialect

    def match_candidates(self) -> List[str]:
        """Names a pattern is tested against: path, dotted path and file names."""
        dotted = self.relative.replace("/", ".")
        name = self.relative.rsplit("/", 1)[-1]
        stem_dotted = dotted.rsplit(".", 1)[0]
        return [self.relative, dotted, stem_dotted, name]


@dataclass
class ScanResult:
    """Candidate files partitioned by dialect."""

    partitions: Dict[Dialect, List[SourceFile]] = field(
        default_factory=lambda: {dialect: [] for dialect in Dialect}
    )

    @property
    def code(self) -> List[SourceFile]:
        return self.partitions[Dialect.CODE]

    @property
    def documents(self) -> List[SourceFile]:
        return self.partitions[Dialect.DOCUMENT]

    def __len__(self) -> int:
        return sum(len(files) for files in self.partitions.values())


class SourceScanner:
    """Walks source roots to find route files with csimple candidates."""

    def __init__(self) -> None:
        self.logger = get_logger("scanner")

    def scan(
        self,
        roots: Sequence[Path],
        *,
        test_roots: Sequence[Path] = (),
        include_test: bool = False,
        include_java: bool = True,
        include_xml: bool = True,
        includes: Sequence[str] | None = None,
        excludes: Sequence[str] | None = None,
    ) -> ScanResult:
        """Return the deduplicated candidate files under ``roots``.

        Test roots are only walked when ``include_test`` is set. A file is kept
        when it matches at least one include (or there are none) and no
        exclude.
        """
        include_patterns = compile_patterns(includes)
        exclude_patterns = compile_patterns(excludes)
        enabled = {
            Dialect.CODE: include_java,
            Dialect.DOCUMENT: include_xml,
        }

        all_roots = list(roots)
        if include_test:
            all_roots.extend(test_roots)

        seen: set[Path] = set()
        candidates: List[SourceFile] = []
        for root in all_roots:
            root_path = Path(root).expanduser()
            if not root_path.is_dir():
                self.logger.debug("Skipping missing source root %s", root_path)
                continue
            for source in _iter_sources(root_path.resolve()):
                if not enabled[source.dialect] or source.path in seen:
                    continue
                seen.add(source.path)
                if not _is_selected(source, include_patterns, exclude_patterns):
                    self.logger.debug("Filtered out %s", source.relative)
                    continue
                candidates.append(source)

        result = ScanResult()
        for source in sorted(candidates, key=lambda item: item.path.as_posix()):
            result.partitions[source.dialect].append(source)
        self.logger.debug(
            "Scanner found %d java and %d xml candidate files",
            len(result.code),
            len(result.documents),
        )
        return result


def _is_selected(
    source: SourceFile,
    include_patterns: Sequence[FilePattern],
    exclude_patterns: Sequence[FilePattern],
) -> bool:
    names = source.match_candidates()
    if any(pattern.matches(names) for pattern in exclude_patterns):
        return False
    if not include_patterns:
        return True
    return any(pattern.matches(names) for pattern in include_patterns)


def _iter_sources(root: Path) -> Iterator[SourceFile]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            dialect = _DIALECT_BY_SUFFIX.get(Path(filename).suffix.lower())
            if dialect is None:
                continue
            path = current_dir / filename
            yield SourceFile(
                path=path,
                relative=path.relative_to(root).as_posix(),
                dialect=dialect,
            )


__all__ = ["FilePattern", "ScanResult", "SourceFile", "SourceScanner", "compile_patterns"]
