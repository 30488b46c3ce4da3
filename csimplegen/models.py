"""Core data models shared across csimplegen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

SYNTHETIC_OWNER = "org.apache.camel.language.csimple.XmlRouteBuilder"


class UsageKind(str, Enum):
    """How the route uses an expression."""

    PREDICATE = "predicate"
    VALUE = "value"


class Dialect(str, Enum):
    """Source dialect an expression site was found in."""

    CODE = "code"
    DOCUMENT = "document"


@dataclass(frozen=True)
class ExtractionSite:
    """A single csimple script discovered in a route source file."""

    script: str
    kind: UsageKind
    owner: Optional[str]
    origin: Path
    dialect: Dialect

    @property
    def is_predicate(self) -> bool:
        return self.kind is UsageKind.PREDICATE

    @property
    def effective_owner(self) -> str:
        return self.owner or SYNTHETIC_OWNER


@dataclass(frozen=True)
class CompilerConfiguration:
    """Imports and aliases applied to every compiled script."""

    imports: Tuple[str, ...] = ()
    aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def create(
        cls, imports: Optional[Tuple[str, ...]] = None, aliases: Optional[Mapping[str, str]] = None
    ) -> "CompilerConfiguration":
        return cls(
            imports=tuple(sorted(set(imports or ()))),
            aliases=MappingProxyType(dict(aliases or {})),
        )

    @property
    def is_empty(self) -> bool:
        return not self.imports and not self.aliases


@dataclass(frozen=True)
class GeneratedUnit:
    """Generated Java source for one extraction site."""

    identity: str
    source: str
    kind: UsageKind
    site: ExtractionSite

    @property
    def relative_path(self) -> Path:
        """Path of the generated file relative to the output directory."""
        return Path(*self.identity.split(".")).with_suffix(".java")


@dataclass(frozen=True)
class Recovered:
    """A file that could not be parsed; the scan continues without it."""

    path: Path
    reason: str


@dataclass(frozen=True)
class Fatal:
    """A script that could not be compiled; the run must stop."""

    site: ExtractionSite
    reason: str

    def describe(self) -> str:
        return f"Cannot compile csimple script '{self.site.script}' from {self.site.origin}: {self.reason}"


@dataclass
class ExtractionOutcome:
    """Sites extracted from one file, or the warning explaining why there are none."""

    path: Path
    sites: Tuple[ExtractionSite, ...] = ()
    warning: Optional[Recovered] = None


@dataclass
class CompileOutcome:
    """Either a generated unit or the fatal error that prevented it."""

    unit: Optional[GeneratedUnit] = None
    error: Optional[Fatal] = None

    @property
    def ok(self) -> bool:
        return self.unit is not None and self.error is None


__all__ = [
    "SYNTHETIC_OWNER",
    "CompileOutcome",
    "CompilerConfiguration",
    "Dialect",
    "ExtractionOutcome",
    "ExtractionSite",
    "Fatal",
    "GeneratedUnit",
    "Recovered",
    "UsageKind",
]
