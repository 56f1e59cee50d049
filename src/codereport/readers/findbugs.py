"""FindBugs / SpotBugs XML reader.

The children of a ``BugInstance`` are read into ``BugElement`` values
tagged by kind and then processed in document order:

- the first ``Class`` that resolves anchors the finding to a resource;
- a top-level ``SourceLine`` sets the line range, unless a concrete one
  was already read;
- a ``Method`` source line fills in the range only when nothing else did.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterator, List, Optional
from xml.etree.ElementTree import Element

from codereport.config.schema import Severity
from codereport.findings.models import Item, Origin
from codereport.readers.base import ReportReader, to_int
from codereport.resources.models import JAVA_SUFFIX, ResourceInfo
from codereport.resources.registry import normalize_file_name

logger = logging.getLogger(__name__)

_KINDS = {
    "Class": "class",
    "Method": "method",
    "Field": "field",
    "SourceLine": "source-line",
    "Int": "int",
}

_PRIORITY_SEVERITY = {
    1: Severity.ERROR,
    2: Severity.WARNING,
    3: Severity.DESIGN,
}


def findbugs_priority_to_severity(priority: Optional[int]) -> Severity:
    return _PRIORITY_SEVERITY.get(priority, Severity.INFO)


@dataclass(frozen=True)
class BugElement:
    """One child of a ``BugInstance``; ``kind`` selects which fields apply."""

    kind: str
    name: str = ""
    signature: str = ""
    start: Optional[int] = None
    end: Optional[int] = None
    value: Optional[int] = None
    source_line: Optional["BugElement"] = None

    def __str__(self) -> str:
        if self.kind == "method":
            return f"{self.name}{self.signature}"
        if self.kind == "source-line":
            return f"{self.start}-{self.end}"
        if self.kind == "int":
            return str(self.value)
        return self.name


def _source_line(elem: Element) -> BugElement:
    return BugElement(
        kind="source-line",
        name=elem.get("classname", ""),
        start=to_int(elem.get("start")),
        end=to_int(elem.get("end")),
    )


def bug_elements(instance: Element) -> Iterator[BugElement]:
    """Yield the recognised children of *instance* in document order."""
    for child in instance:
        kind = _KINDS.get(child.tag)
        if kind is None:
            continue
        if kind == "class":
            yield BugElement(kind=kind, name=child.get("classname", ""))
        elif kind == "method":
            line = child.find("SourceLine")
            yield BugElement(
                kind=kind,
                name=child.get("name", ""),
                signature=child.get("signature", ""),
                source_line=_source_line(line) if line is not None else None,
            )
        elif kind == "field":
            yield BugElement(kind=kind, name=child.get("name", ""))
        elif kind == "source-line":
            yield _source_line(child)
        else:
            yield BugElement(kind=kind, value=to_int(child.get("value")))


def relative_java_file(class_name: str) -> str:
    """``org.acme.Outer$Inner`` -> ``org/acme/Outer.java``."""
    if "$" in class_name:
        class_name = class_name[: class_name.index("$")]
    return class_name.replace(".", os.sep) + JAVA_SUFFIX


class FindBugsReader(ReportReader):
    origin = Origin.FINDBUGS
    patch_input = True

    def read(self, root: Element) -> None:
        source_dirs = [(d.text or "").strip() for d in root.iter("SrcDir")]
        logger.debug("Using source dirs %s", source_dirs)
        instances = list(root.iter("BugInstance"))
        logger.debug("Found %d FindBugs bug instances", len(instances))
        for instance in instances:
            self._read_instance(instance, source_dirs)

    def _read_instance(self, instance: Element, source_dirs: List[str]) -> None:
        item = Item(message=_long_message(instance))
        top_level_read = False
        for element in bug_elements(instance):
            if element.kind == "class":
                if item.origin is not None:
                    continue
                java_file = relative_java_file(element.name)
                resource = self._find_resource(source_dirs, java_file)
                if resource is None:
                    logger.debug("Ignoring findings for resource %s", java_file)
                    continue
                item.origin = Origin.FINDBUGS
                item.severity = findbugs_priority_to_severity(to_int(instance.get("priority")))
                item.finding_type = instance.get("type", "")
                self.add_item(resource, item)
            elif element.kind == "source-line":
                if top_level_read and (item.line or 0) > 0:
                    continue
                if element.start is not None:
                    item.line = element.start
                    top_level_read = True
                    if element.end is not None:
                        item.end_line = element.end
            elif element.kind == "method":
                if item.line is not None or element.source_line is None:
                    continue
                if element.source_line.start is not None:
                    item.line = element.source_line.start
                    if element.source_line.end is not None:
                        item.end_line = element.source_line.end

    def _find_resource(self, source_dirs: List[str], java_file: str) -> Optional[ResourceInfo]:
        for source_dir in source_dirs:
            resource = self.registry.lookup(normalize_file_name(source_dir + os.sep + java_file))
            if resource is not None:
                return resource
        return None


def _long_message(instance: Element) -> str:
    for tag in ("LongMessage", "ShortMessage"):
        child = instance.find(tag)
        if child is not None and child.text:
            return child.text.strip()
    return instance.get("type", "")
