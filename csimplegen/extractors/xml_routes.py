"""Extraction of csimple expressions from XML route documents."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional

from ..models import Dialect, ExtractionSite, UsageKind
from .base import SiteExtractor, SourceParseError

CSIMPLE_LANGUAGE = "csimple"
LOOP_ELEMENT = "loop"

# EIP elements whose expression child is evaluated as a predicate.
CONDITION_ELEMENTS = frozenset(
    {
        "completionPredicate",
        "continued",
        "filter",
        "handled",
        "onWhen",
        "retryWhile",
        "validate",
        "when",
    }
)


class XmlSiteExtractor(SiteExtractor):
    """Finds ``<csimple>`` (or ``language="csimple"``) elements in XML routes."""

    dialect = Dialect.DOCUMENT

    def find_sites(self, path: Path) -> List[ExtractionSite]:
        try:
            root = ET.parse(path).getroot()
        except ET.ParseError as exc:
            raise SourceParseError(str(exc)) from exc

        parents: Dict[ET.Element, ET.Element] = {
            child: parent for parent in root.iter() for child in parent
        }
        sites: List[ExtractionSite] = []
        for element in root.iter():
            if not _is_csimple(element):
                continue
            script = "".join(element.itertext()).strip()
            if not script:
                continue
            sites.append(
                ExtractionSite(
                    script=script,
                    kind=_usage_kind(parents.get(element)),
                    owner=None,
                    origin=path,
                    dialect=self.dialect,
                )
            )
        return sites


def _local_name(tag: object) -> Optional[str]:
    if not isinstance(tag, str):
        return None
    return tag.rsplit("}", 1)[-1]


def _is_csimple(element: ET.Element) -> bool:
    if _local_name(element.tag) == CSIMPLE_LANGUAGE:
        return True
    return element.get("language") == CSIMPLE_LANGUAGE


def _usage_kind(parent: Optional[ET.Element]) -> UsageKind:
    if parent is None:
        return UsageKind.VALUE
    name = _local_name(parent.tag)
    if name in CONDITION_ELEMENTS:
        return UsageKind.PREDICATE
    # <loop doWhile="true"> repeats while its expression holds; otherwise it is the loop count
    if name == LOOP_ELEMENT and parent.get("doWhile", "").strip().lower() == "true":
        return UsageKind.PREDICATE
    return UsageKind.VALUE


__all__ = ["CONDITION_ELEMENTS", "CSIMPLE_LANGUAGE", "LOOP_ELEMENT", "XmlSiteExtractor"]
