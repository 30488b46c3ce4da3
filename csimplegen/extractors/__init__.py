"""Site extractor implementations and selection utilities."""

from __future__ import annotations

from typing import Callable, Dict

from ..models import Dialect
from .base import SiteExtractor, SourceParseError
from .java_routes import JavaSiteExtractor
from .xml_routes import XmlSiteExtractor

_BUILTIN_FACTORIES: Dict[Dialect, Callable[[], SiteExtractor]] = {
    Dialect.CODE: JavaSiteExtractor,
    Dialect.DOCUMENT: XmlSiteExtractor,
}


def build_extractors(*, include_java: bool = True, include_xml: bool = True) -> Dict[Dialect, SiteExtractor]:
    """Return one extractor per enabled dialect."""
    enabled = {Dialect.CODE: include_java, Dialect.DOCUMENT: include_xml}
    extractors: Dict[Dialect, SiteExtractor] = {}
    for dialect, factory in _BUILTIN_FACTORIES.items():
        if not enabled[dialect]:
            continue
        instance = factory()
        if not isinstance(instance, SiteExtractor):
            raise TypeError(f"Extractor factory for '{dialect.value}' did not return a SiteExtractor")
        extractors[dialect] = instance
    return extractors


__all__ = [
    "JavaSiteExtractor",
    "SiteExtractor",
    "SourceParseError",
    "XmlSiteExtractor",
    "build_extractors",
]
