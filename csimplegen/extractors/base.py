"""Base class for csimple site extractors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from ..logging import get_logger
from ..models import Dialect, ExtractionOutcome, ExtractionSite, Recovered


class SourceParseError(ValueError):
    """Raised by extractors when a file is not well-formed."""


class SiteExtractor(ABC):
    """Contract for extractors that find csimple sites in one source dialect."""

    dialect: Dialect

    def __init__(self) -> None:
        self.logger = get_logger(f"extractors.{self.dialect.value}")

    def extract(self, path: Path) -> ExtractionOutcome:
        """Return the sites in ``path``; parse failures become a warning, not an error."""
        try:
            sites = tuple(site for site in self.find_sites(path) if site.script.strip())
        except Exception as exc:
            self.logger.warning("Error parsing %s file %s due %s", self.dialect.value, path, exc)
            return ExtractionOutcome(path=path, warning=Recovered(path=path, reason=str(exc)))
        if sites:
            self.logger.debug("Found %d csimple expressions in %s", len(sites), path)
        return ExtractionOutcome(path=path, sites=sites)

    @abstractmethod
    def find_sites(self, path: Path) -> Iterable[ExtractionSite]:
        """Parse ``path`` and yield its csimple sites, raising on malformed input."""


__all__ = ["SiteExtractor", "SourceParseError"]
