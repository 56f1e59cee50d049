"""Checkstyle XML reader."""

from __future__ import annotations

import logging
from typing import Optional
from xml.etree.ElementTree import Element

from codereport.config.schema import Severity
from codereport.findings.models import Item, Origin
from codereport.readers.base import ReportReader, to_int
from codereport.resources.registry import normalize_file_name

logger = logging.getLogger(__name__)

_SEVERITY = {
    "error": Severity.ERROR,
    "warning": Severity.WARNING,
    "info": Severity.INFO,
    "ignore": Severity.FILTERED,
}


def checkstyle_severity(value: Optional[str]) -> Optional[Severity]:
    if value is None:
        return None
    return _SEVERITY.get(value.strip().lower())


class CheckstyleReader(ReportReader):
    origin = Origin.CHECKSTYLE

    def read(self, root: Element) -> None:
        for file_elem in root.iter("file"):
            name = normalize_file_name(file_elem.get("name", ""))
            resource = self.registry.lookup(name)
            if resource is None:
                logger.debug("Ignore findings for resource %s", name)
                continue
            for error in file_elem.iter("error"):
                self.add_item(resource, self._create_item(error))

    def _create_item(self, error: Element) -> Item:
        message = error.get("message", "")
        item = Item(
            origin=Origin.CHECKSTYLE,
            severity=checkstyle_severity(error.get("severity")),
            message=message,
            line=to_int(error.get("line")),
            column=to_int(error.get("column")),
        )
        finding_type = self.taxonomy.classify(Origin.CHECKSTYLE, message)
        if finding_type is not None:
            item.finding_type = finding_type.symbol
            if finding_type.severity is not None:
                item.severity = finding_type.severity
        else:
            source = error.get("source", "")
            item.finding_type = source.rsplit(".", 1)[-1]
            logger.info("Unknown checkstyle message '%s' from %s", message, source)
        if item.severity is None:
            item.severity = Severity.CODE_STYLE
        return item
