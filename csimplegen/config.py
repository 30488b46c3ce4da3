"""Project settings for csimplegen (.csimplegen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

SETTINGS_FILENAME = ".csimplegen.yml"

_DEFAULT_SOURCE_ROOTS = ("src/main/java", "src/main/resources")
_DEFAULT_TEST_SOURCE_ROOTS = ("src/test/java", "src/test/resources")


class ConfigError(RuntimeError):
    """Raised when a configuration file cannot be read or parsed."""


@dataclass
class ProjectSettings:
    """Effective generator settings for one project."""

    root: Path
    source_roots: List[Path] = field(default_factory=list)
    test_source_roots: List[Path] = field(default_factory=list)
    output_dir: Optional[Path] = None
    output_resource_dir: Optional[Path] = None
    resource_dir: Optional[Path] = None
    include_java: bool = True
    include_xml: bool = True
    include_test: bool = False
    includes: List[str] = field(default_factory=list)
    excludes: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.source_roots:
            self.source_roots = [self.root / item for item in _DEFAULT_SOURCE_ROOTS]
        if not self.test_source_roots:
            self.test_source_roots = [self.root / item for item in _DEFAULT_TEST_SOURCE_ROOTS]
        if self.output_dir is None:
            self.output_dir = self.root / "src" / "generated" / "java"
        if self.output_resource_dir is None:
            self.output_resource_dir = self.root / "src" / "generated" / "resources"
        if self.resource_dir is None:
            self.resource_dir = self.root / "src" / "main" / "resources"

    @property
    def compiler_config_path(self) -> Path:
        if self.resource_dir is None:
            raise ConfigError("resource_dir is not configured")
        return self.resource_dir / "camel-csimple.properties"

    def with_overrides(self, **overrides: Any) -> "ProjectSettings":
        """Return a copy with non-None overrides applied (used by the CLI)."""
        values = {key: value for key, value in overrides.items() if value is not None}
        for key in ("output_dir", "output_resource_dir", "resource_dir"):
            if key in values:
                values[key] = self._resolve(values[key])
        return replace(self, **values)

    def _resolve(self, value: Any) -> Path:
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.root / path


def load_settings(project_path: Path) -> ProjectSettings:
    """Load settings for the project at ``project_path``."""
    settings_file = _resolve_settings_path(project_path)
    root = settings_file.parent.resolve()

    if not settings_file.exists():
        return ProjectSettings(root=root)

    data = _read_settings(settings_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{SETTINGS_FILENAME} must contain a mapping at the root")

    def _paths(key: str) -> List[Path]:
        return [_resolve_path(root, item) for item in _as_str_list(data.get(key))]

    def _path(key: str) -> Optional[Path]:
        value = _as_str(data.get(key))
        return _resolve_path(root, value) if value else None

    include_java = _as_bool(data.get("include_java"))
    include_xml = _as_bool(data.get("include_xml"))
    include_test = _as_bool(data.get("include_test"))

    return ProjectSettings(
        root=root,
        source_roots=_paths("source_roots"),
        test_source_roots=_paths("test_source_roots"),
        output_dir=_path("output_dir"),
        output_resource_dir=_path("output_resource_dir"),
        resource_dir=_path("resource_dir"),
        include_java=True if include_java is None else include_java,
        include_xml=True if include_xml is None else include_xml,
        include_test=bool(include_test),
        includes=split_patterns(data.get("includes")),
        excludes=split_patterns(data.get("excludes")),
    )


def split_patterns(value: Any) -> List[str]:
    """Split comma separated pattern strings (or lists of them) into entries."""
    patterns: List[str] = []
    for item in _as_str_list(value):
        patterns.extend(part.strip() for part in item.split(",") if part.strip())
    return patterns


def _resolve_settings_path(project_path: Path) -> Path:
    project_path = project_path.expanduser()
    if project_path.is_dir():
        return (project_path / SETTINGS_FILENAME).resolve()
    if project_path.name != SETTINGS_FILENAME:
        return (project_path.parent / SETTINGS_FILENAME).resolve()
    return project_path.resolve()


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else root / path


def _read_settings(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot load {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["ConfigError", "ProjectSettings", "SETTINGS_FILENAME", "load_settings", "split_patterns"]
