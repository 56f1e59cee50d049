"""CPD (copy/paste detector) XML reader.

Every location of a duplication becomes its own item, and each item's
message names the other locations.
"""

from __future__ import annotations

import logging
from typing import List
from xml.etree.ElementTree import Element

from codereport.config.schema import Severity
from codereport.findings.models import Item, Origin
from codereport.readers.base import ReportReader, to_int
from codereport.resources.registry import normalize_file_name
from codereport.rules.builtin.cpd import CPD

logger = logging.getLogger(__name__)


class CpdReader(ReportReader):
    origin = Origin.CPD

    def read(self, root: Element) -> None:
        for duplication in root.iter("duplication"):
            locations = duplication.findall("file")
            lines = to_int(duplication.get("lines")) or 0
            for index, location in enumerate(locations):
                name = normalize_file_name(location.get("path", ""))
                resource = self.registry.lookup(name)
                if resource is None:
                    logger.debug("Ignoring findings for resource %s", name)
                    continue
                line = to_int(location.get("line")) or 0
                self.add_item(
                    resource,
                    Item(
                        origin=Origin.CPD,
                        finding_type=CPD.symbol,
                        severity=Severity.CPD,
                        message=self._message(index, locations, duplication),
                        line=line,
                        end_line=line + lines,
                    ),
                )

    def _message(self, current: int, locations: List[Element], duplication: Element) -> str:
        parts = [
            f"Copied and pasted code. {duplication.get('tokens', '')} equal tokens "
            f"({duplication.get('lines', '')} lines) found in {len(locations)} "
            "locations.  See also: "
        ]
        for index, location in enumerate(locations):
            if index == current:
                continue
            path = location.get("path", "")
            peer = self.registry.lookup(normalize_file_name(path))
            name = f"{peer.package}.{peer.classname}" if peer is not None else path
            parts.append(f"{name}:{location.get('line', '')} ")
        return "".join(parts)
