"""Generates Java source units from csimple extraction sites."""

from __future__ import annotations

import re
from collections import defaultdict
from pathlib import Path
from re import Pattern
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..logging import get_logger
from ..manifest import GENERATED_MSG
from ..models import (
    CompileOutcome,
    CompilerConfiguration,
    ExtractionSite,
    Fatal,
    GeneratedUnit,
)
from .functions import java_string
from .lexer import CSimpleSyntaxError
from .parser import compile_predicate, compile_value

IDENTITY_SUFFIX = "$$Csimple"

_TEMPLATE_NAME = "csimple_class.java.j2"


def number_sites(sites: Iterable[ExtractionSite]) -> List[Tuple[ExtractionSite, int]]:
    """Pair each site with a 1-based sequence number unique within its owner."""
    counters: Dict[str, int] = defaultdict(int)
    numbered: List[Tuple[ExtractionSite, int]] = []
    for site in sites:
        owner = site.effective_owner
        counters[owner] += 1
        numbered.append((site, counters[owner]))
    return numbered


def derive_identity(site: ExtractionSite, sequence: int) -> str:
    """Return the generated class name for the ``sequence``-th site of its owner."""
    if sequence < 1:
        raise ValueError("sequence numbers start at 1")
    identity = f"{site.effective_owner}{IDENTITY_SUFFIX}{sequence}"
    if not _is_qualified_name(identity):
        raise ValueError(f"Owner '{site.effective_owner}' is not a valid qualified name")
    return identity


class ExpressionCompiler:
    """Compiles csimple scripts into Java classes implementing the evaluation contract."""

    def __init__(
        self,
        configuration: CompilerConfiguration | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        self.configuration = configuration or CompilerConfiguration.create()
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._alias_pattern = _build_alias_pattern(self.configuration.aliases)
        self.logger = get_logger("compiler")

    def expand_aliases(self, script: str) -> str:
        """Replace alias tokens with their expansions in a single pass."""
        if self._alias_pattern is None:
            return script
        aliases = self.configuration.aliases
        return self._alias_pattern.sub(lambda match: aliases[match.group(0)], script)

    def compile(self, site: ExtractionSite, sequence: int = 1) -> CompileOutcome:
        """Compile one site.

        Malformed scripts and owners that cannot name a Java class come back
        as a ``Fatal`` outcome.
        """
        script = self.expand_aliases(site.script)
        try:
            if site.is_predicate:
                code = compile_predicate(script)
            else:
                code = compile_value(script)
        except CSimpleSyntaxError as exc:
            return CompileOutcome(error=Fatal(site=site, reason=str(exc)))

        try:
            identity = derive_identity(site, sequence)
        except ValueError as exc:
            return CompileOutcome(error=Fatal(site=site, reason=str(exc)))
        package, _, class_name = identity.rpartition(".")
        source = self._env.get_template(_TEMPLATE_NAME).render(
            package=package,
            class_name=class_name,
            imports=list(self.configuration.imports),
            generated_msg=GENERATED_MSG,
            predicate=site.is_predicate,
            text=java_string(script),
            code=code,
        )
        self.logger.debug("Generated source code for %s:\n\n%s", identity, source)
        return CompileOutcome(
            unit=GeneratedUnit(identity=identity, source=source, kind=site.kind, site=site)
        )

    def compile_all(self, sites: Iterable[ExtractionSite]) -> List[CompileOutcome]:
        """Number and compile ``sites``, stopping at the first fatal outcome."""
        outcomes: List[CompileOutcome] = []
        for site, sequence in number_sites(sites):
            outcome = self.compile(site, sequence)
            outcomes.append(outcome)
            if outcome.error is not None:
                break
        return outcomes


def _is_qualified_name(name: str) -> bool:
    # Java identifiers are Unicode and may also contain $
    return all(part.replace("$", "_").isidentifier() for part in name.split("."))


def _build_alias_pattern(aliases: Mapping[str, str]) -> Optional[Pattern[str]]:
    if not aliases:
        return None
    alternatives = []
    for key in sorted(aliases, key=lambda item: (-len(item), item)):
        pattern = re.escape(key)
        if re.match(r"\w", key[0]):
            pattern = r"(?<!\w)" + pattern
        if re.match(r"\w", key[-1]):
            pattern = pattern + r"(?!\w)"
        alternatives.append(pattern)
    return re.compile("|".join(alternatives))


__all__ = ["ExpressionCompiler", "IDENTITY_SUFFIX", "derive_identity", "number_sites"]
