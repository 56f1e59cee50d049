"""Generic reader for free-text tool logs (javadoc, javac, custom formats).

The log is scanned with the root pattern of the origin's format
description. Each root match yields a filename and a message text; the
text is then classified by the origin's finding types. Unclassified
matches are skipped line by line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional
from xml.etree.ElementTree import Element

from codereport.findings.models import Item, Origin
from codereport.readers.base import ItemMap, ReportParseError, ReportReader
from codereport.resources.registry import ResourceRegistry
from codereport.rules.registry import FindingTaxonomy
from codereport.scanner.classifier import PatternClassifier, trim

logger = logging.getLogger(__name__)


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def add_unique(items: List[Item], item: Item) -> None:
    """Append *item*, dropping an earlier one at the same position with the same text."""
    for index, existing in enumerate(items):
        if (
            existing.line == item.line
            and existing.column == item.column
            and existing.origin == item.origin
            and existing.message == item.message
        ):
            del items[index]
            break
    items.append(item)


class GenericReader(ReportReader):
    """Reads logs described by ``<origin>.xml`` format descriptions."""

    def __init__(
        self,
        registry: ResourceRegistry,
        taxonomy: FindingTaxonomy,
        origin: Origin = Origin.GENERIC,
    ) -> None:
        self.origin = origin
        super().__init__(registry, taxonomy)
        self.description = taxonomy.format_for(origin)
        self.classifier = PatternClassifier(self.description.finding_types)

    def parse(self, path: Path) -> None:
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise ReportParseError(f"Failed to read '{path}': {exc}") from exc
        self.scan(content)

    def read(self, root: Element) -> None:
        raise ReportParseError(f"'{self.origin}' reports are text logs, not XML")

    def scan(self, content: str) -> None:
        """Run the scan loop over *content*, collecting items."""
        content = normalize_newlines(content)
        root = self.description.root
        pattern = root.compiled_pattern
        pos = 0
        while pos < len(content):
            match = pattern.search(content, pos)
            if match is None:
                logger.debug("No match after %d '%s'", pos, trim(content[pos:]))
                break
            text = match.group(root.text_pos)
            if text is None:
                text, pos = "", match.start()
            else:
                pos = match.start(root.text_pos)
            logger.debug("Root pattern matched '%s', end at %d", trim(text), match.end())
            result = self.classifier.classify(content, text, pos)
            if result.item is None:
                newline = content.find("\n", pos)
                pos = newline + 1 if newline != -1 else len(content)
                continue
            pos = result.pos
            self._complete_item(result.item, match)
            self._add_item_to_resource(match.group(root.filename_pos), result.item)

    def _complete_item(self, item: Item, match) -> None:
        root = self.description.root
        item.origin = self.origin
        if item.severity is None:
            item.severity = root.severity
        if item.line is None and root.line_start_pos is not None:
            line = match.group(root.line_start_pos)
            if line:
                item.line = int(line)
        if not item.finding_type:
            item.finding_type = str(self.origin)
        if item.message is None:
            item.message = match.group(root.text_pos)
        if root.is_global:
            item.is_global = True

    def _add_item_to_resource(self, filename: Optional[str], item: Item) -> None:
        resource = self.registry.lookup(filename) if filename else None
        if resource is None and not item.is_global:
            logger.debug("Ignoring findings for resource %s", filename)
            return
        add_unique(self.items_for(resource), item)

    def merge_into(self, target: ItemMap) -> None:
        """Merge into *target*, replacing findings another pass already recorded."""
        for resource, items in self._items.items():
            merged = target.setdefault(resource, [])
            for item in items:
                add_unique(merged, item)
