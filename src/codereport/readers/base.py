"""Common reader contract — parse one tool document, collect items per resource."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Union
from xml.etree.ElementTree import Element, ParseError

from defusedxml.common import DefusedXmlException
from defusedxml.ElementTree import fromstring

from codereport.findings.models import Item, Origin
from codereport.resources.models import ResourceInfo
from codereport.resources.registry import ResourceRegistry
from codereport.rules.registry import FindingTaxonomy

logger = logging.getLogger(__name__)

ItemMap = Dict[Optional[ResourceInfo], List[Item]]

_QUOTED = re.compile(r'"[^"]*"')


class ReportParseError(Exception):
    """Raised when an input document cannot be read or has the wrong shape."""


def patch_unescaped_attributes(text: str) -> str:
    """Escape ``<`` and ``>`` inside double-quoted attribute values."""
    return _QUOTED.sub(
        lambda m: m.group(0).replace("<", "&lt;").replace(">", "&gt;"), text
    )


def parse_xml(data: Union[bytes, str], source: str) -> Element:
    try:
        return fromstring(data)
    except (ParseError, DefusedXmlException) as exc:
        raise ReportParseError(f"Malformed XML in {source}: {exc}") from exc


def to_int(value: Optional[str]) -> Optional[int]:
    """Parse an optional integer attribute; blanks and garbage give ``None``."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


class ReportReader:
    """Base class of all report readers.

    Subclasses set ``origin`` and implement ``read(root)``. Readers whose
    tools emit unescaped ``<``/``>`` in attributes set ``patch_input``.
    """

    origin: Optional[Origin] = None
    patch_input: bool = False

    def __init__(self, registry: ResourceRegistry, taxonomy: FindingTaxonomy) -> None:
        self.registry = registry
        self.taxonomy = taxonomy
        self._items: ItemMap = {}
        if self.origin is not None:
            taxonomy.initialize(self.origin)

    def parse(self, path: Path) -> None:
        """Read and interpret the document at *path*."""
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ReportParseError(f"Cannot read {path}: {exc}") from exc
        if self.patch_input:
            data = patch_unescaped_attributes(data.decode("utf-8", errors="replace"))
        self.read(parse_xml(data, str(path)))

    def read(self, root: Element) -> None:
        raise NotImplementedError

    def get_items(self) -> ItemMap:
        return self._items

    def items_for(self, resource: Optional[ResourceInfo]) -> List[Item]:
        return self._items.setdefault(resource, [])

    def add_item(self, resource: Optional[ResourceInfo], item: Item) -> None:
        self.items_for(resource).append(item)

    def merge_into(self, target: ItemMap) -> None:
        """Append this reader's items to *target*, resource by resource."""
        for resource, items in self._items.items():
            target.setdefault(resource, []).extend(items)
