"""Line coverage readers — JCoverage and Cobertura (coverage.py) XML."""

from __future__ import annotations

import logging
import os
from typing import Iterable, List, Optional
from xml.etree.ElementTree import Element

from codereport.config.schema import Severity
from codereport.findings.models import Item, Origin
from codereport.readers.base import ReportReader, to_int
from codereport.resources.models import JAVA_SUFFIX, ResourceInfo
from codereport.resources.registry import normalize_file_name
from codereport.rules.builtin.cpd import COVERAGE

logger = logging.getLogger(__name__)


def coverage_items(lines: Iterable[Element]) -> List[Item]:
    """One COVERAGE item per line with a positive hit count."""
    items = []
    for line in lines:
        hits = to_int(line.get("hits")) or 0
        if hits <= 0:
            continue
        items.append(
            Item(
                origin=Origin.COVERAGE,
                finding_type=COVERAGE.symbol,
                severity=Severity.COVERAGE,
                line=to_int(line.get("number")),
                counter=hits,
            )
        )
    return items


class JCoverageReader(ReportReader):
    origin = Origin.COVERAGE
    patch_input = True

    def read(self, root: Element) -> None:
        base_dir = root.get("src", "")
        for clazz in root.iter("class"):
            class_name = clazz.get("name", "")
            java_file = class_name.replace(".", "/") + JAVA_SUFFIX
            name = normalize_file_name(f"{base_dir}{os.sep}{java_file}")
            resource = self.registry.lookup(name)
            if resource is None:
                logger.debug("Ignoring findings for resource %s", name)
                continue
            self.items_for(resource).extend(coverage_items(clazz.iter("line")))


class CoberturaReader(ReportReader):
    origin = Origin.COVERAGE

    def read(self, root: Element) -> None:
        sources = [(s.text or "").strip() for s in root.iter("source")]
        for clazz in root.iter("class"):
            filename = clazz.get("filename", "")
            resource = self._resolve(filename, sources)
            if resource is None:
                logger.debug("Ignoring findings for resource %s", filename)
                continue
            self.items_for(resource).extend(coverage_items(clazz.findall("lines/line")))

    def _resolve(self, filename: str, sources: List[str]) -> Optional[ResourceInfo]:
        for source in sources:
            if not source:
                continue
            resource = self.registry.lookup(os.path.join(source, filename))
            if resource is not None:
                return resource
        return self.registry.lookup(filename)
