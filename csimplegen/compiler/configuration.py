"""Loader for the csimple compiler configuration (camel-csimple.properties)."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Set

from ..config import ConfigError
from ..logging import get_logger
from ..models import CompilerConfiguration

_IMPORT_MARKER = "import "

logger = get_logger("compiler.configuration")


def load_compiler_configuration(config_path: Path) -> CompilerConfiguration:
    """Read imports and aliases from ``config_path``.

    A missing file yields an empty configuration. Lines that are neither
    comments, imports nor ``key=value`` pairs are ignored.
    """
    if not config_path.exists():
        return CompilerConfiguration.create()

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot load {config_path}: {exc}") from exc

    imports: Set[str] = set()
    aliases: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if line.startswith("#"):
            continue
        if line.startswith(_IMPORT_MARKER):
            imports.add(line)
            continue
        if "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key and value:
            aliases[key] = value

    if imports or aliases:
        logger.info(
            "Loaded csimple language imports: %d and aliases: %d from configuration: %s",
            len(imports),
            len(aliases),
            config_path,
        )
    return CompilerConfiguration.create(tuple(imports), aliases)


__all__ = ["load_compiler_configuration"]
