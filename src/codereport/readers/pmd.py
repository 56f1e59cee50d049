"""PMD XML reader."""

from __future__ import annotations

import logging
from xml.etree.ElementTree import Element

from codereport.findings.models import Item, Origin
from codereport.readers.base import ReportReader, to_int
from codereport.resources.registry import normalize_file_name
from codereport.rules.registry import pmd_priority_to_severity

logger = logging.getLogger(__name__)


class PmdReader(ReportReader):
    origin = Origin.PMD

    def read(self, root: Element) -> None:
        for file_elem in root.iter("file"):
            name = normalize_file_name(file_elem.get("name", ""))
            resource = self.registry.lookup(name)
            if resource is None:
                logger.debug("Ignoring findings for resource %s", name)
                continue
            for violation in file_elem.iter("violation"):
                self.add_item(
                    resource,
                    Item(
                        origin=Origin.PMD,
                        finding_type=violation.get("rule", ""),
                        severity=pmd_priority_to_severity(to_int(violation.get("priority"))),
                        message=(violation.text or "").strip(),
                        line=to_int(violation.get("beginline")),
                        end_line=to_int(violation.get("endline")),
                        column=to_int(violation.get("begincolumn")),
                        end_column=to_int(violation.get("endcolumn")),
                    ),
                )
