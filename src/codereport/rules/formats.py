"""Declarative finding-type formats for log-based origins.

A format description has one root type, whose pattern locates each finding
in a tool log and captures the filename, message text and (optionally) line,
plus an ordered list of finding types whose patterns classify the captured
message text.

Descriptions are XML (``<origin>.xml``) or YAML (``<origin>.yaml``)::

    <finding-type-format>
      <root-type text-pos="3" filename-pos="1" line-start-pos="2">
        <pattern>^(.+\\.java):([0-9]+): (.*)$</pattern>
      </root-type>
      <finding-type symbol="JAVAC_DEPRECATION" priority="10"
                    text-pos="1" column-start-pos="caret" severity="design">
        <pattern>warning: \\[deprecation\\] (.*)$</pattern>
      </finding-type>
    </finding-type-format>

Fields may be given as attributes or child elements, with ``-`` or ``_``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
from xml.etree.ElementTree import Element, ParseError

import yaml
from defusedxml.common import DefusedXmlException
from defusedxml.ElementTree import fromstring

from codereport.config.schema import Severity
from codereport.findings.models import Origin
from codereport.rules.models import GenericFindingType, priority_order

logger = logging.getLogger(__name__)

BUILTIN_FORMAT_DIR = Path(__file__).parent / "ftf"

CARET = "caret"


class FormatDescriptionError(Exception):
    """Raised when a format description is missing or invalid."""


@dataclass(frozen=True)
class RootType:
    """Locates finding occurrences inside a tool log."""

    pattern: str
    text_pos: int
    filename_pos: int
    line_start_pos: Optional[int] = None
    severity: Severity = Severity.CODE_STYLE
    is_global: bool = False

    _compiled_pattern: Optional[re.Pattern[str]] = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def compiled_pattern(self) -> re.Pattern[str]:
        if self._compiled_pattern is None:
            object.__setattr__(
                self, "_compiled_pattern", re.compile(self.pattern, re.MULTILINE)
            )
        return self._compiled_pattern


@dataclass
class FormatDescription:
    origin: Origin
    root: RootType
    finding_types: List[GenericFindingType] = field(default_factory=list)
    source: Optional[Path] = None


# ---- field access ----


def _xml_field(elem: Element, name: str) -> Optional[str]:
    for key in (name, name.replace("-", "_")):
        if key in elem.attrib:
            return elem.attrib[key]
        child = elem.find(key)
        if child is not None:
            return (child.text or "").strip() if key != "pattern" else (child.text or "")
    return None


def _mapping_field(data: Dict[str, Any], name: str) -> Optional[str]:
    for key in (name, name.replace("-", "_")):
        if key in data and data[key] is not None:
            return str(data[key])
    return None


def _to_int(value: Optional[str], name: str, required: bool = False) -> Optional[int]:
    if value is None or value.strip() == "":
        if required:
            raise FormatDescriptionError(f"Missing required field '{name}'")
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise FormatDescriptionError(f"Field '{name}' must be an integer, got {value!r}") from exc


def _to_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in ("true", "1", "yes")


def _to_severity(value: Optional[str], default: Optional[Severity]) -> Optional[Severity]:
    if value is None or value.strip() == "":
        return default
    try:
        return Severity.from_string(value)
    except ValueError as exc:
        raise FormatDescriptionError(str(exc)) from exc


def _check_pattern(pattern: Optional[str], owner: str) -> str:
    if not pattern:
        raise FormatDescriptionError(f"{owner}: missing pattern")
    try:
        re.compile(pattern, re.MULTILINE)
    except re.error as exc:
        raise FormatDescriptionError(f"{owner}: invalid pattern {pattern!r}: {exc}") from exc
    return pattern


def _build_root(get) -> RootType:
    return RootType(
        pattern=_check_pattern(get("pattern"), "root-type"),
        text_pos=_to_int(get("text-pos"), "text-pos", required=True),
        filename_pos=_to_int(get("filename-pos"), "filename-pos", required=True),
        line_start_pos=_to_int(get("line-start-pos"), "line-start-pos"),
        severity=_to_severity(get("severity"), Severity.CODE_STYLE),
        is_global=_to_bool(get("global")),
    )


def _build_finding_type(get, origin: Origin) -> GenericFindingType:
    symbol = get("symbol")
    if not symbol:
        raise FormatDescriptionError("finding-type without symbol")
    column_start = get("column-start-pos")
    by_caret = column_start is not None and column_start.strip().lower() == CARET
    return GenericFindingType(
        symbol=symbol,
        short_text=get("short-description") or "",
        description=get("description") or "",
        severity=_to_severity(get("severity"), None),
        pattern=_check_pattern(get("pattern"), symbol),
        origin=origin,
        priority=_to_int(get("priority"), "priority") or 0,
        text_pos=_to_int(get("text-pos"), "text-pos"),
        line_start_pos=_to_int(get("line-start-pos"), "line-start-pos"),
        line_end_pos=_to_int(get("line-end-pos"), "line-end-pos"),
        column_start_pos=None if by_caret else _to_int(column_start, "column-start-pos"),
        column_end_pos=_to_int(get("column-end-pos"), "column-end-pos"),
        source_text_pos=_to_int(get("source-text-pos"), "source-text-pos"),
        column_by_caret=by_caret,
        is_global=_to_bool(get("global")),
    )


# ---- parsing ----


def parse_format_xml(text: str, origin: Origin) -> FormatDescription:
    """Parse an XML format description."""
    try:
        root_elem = fromstring(text)
    except (ParseError, DefusedXmlException) as exc:
        raise FormatDescriptionError(f"Malformed format description for '{origin}': {exc}") from exc

    root_type_elem = root_elem.find("root-type")
    if root_type_elem is None:
        root_type_elem = root_elem.find("root_type")
    if root_type_elem is None:
        raise FormatDescriptionError(f"Format description for '{origin}' has no root-type")

    root = _build_root(lambda name: _xml_field(root_type_elem, name))
    types = [
        _build_finding_type(lambda name, e=elem: _xml_field(e, name), origin)
        for elem in list(root_elem.iter("finding-type")) + list(root_elem.iter("finding_type"))
    ]
    return FormatDescription(origin=origin, root=root, finding_types=sorted(types, key=priority_order))


def parse_format_mapping(data: Any, origin: Origin) -> FormatDescription:
    """Build a format description from a parsed YAML mapping."""
    if not isinstance(data, dict):
        raise FormatDescriptionError(f"Format description for '{origin}' must be a mapping")
    root_data = data.get("root_type") or data.get("root-type")
    if not isinstance(root_data, dict):
        raise FormatDescriptionError(f"Format description for '{origin}' has no root_type")

    root = _build_root(lambda name: _mapping_field(root_data, name))
    entries = data.get("finding_types") or data.get("finding-types") or []
    types = [
        _build_finding_type(lambda name, e=entry: _mapping_field(e, name), origin)
        for entry in entries
    ]
    return FormatDescription(origin=origin, root=root, finding_types=sorted(types, key=priority_order))


def load_format_description(
    origin: Origin, search_dirs: Iterable[Path] = ()
) -> FormatDescription:
    """Find and load ``<origin>.xml`` / ``<origin>.yaml``.

    Searched in *search_dirs*, then the packaged formats, then the
    current directory.
    """
    dirs = [*search_dirs, BUILTIN_FORMAT_DIR, Path.cwd()]
    base = origin.value.lower()
    for directory in dirs:
        for suffix in (".xml", ".yaml", ".yml"):
            candidate = Path(directory) / f"{base}{suffix}"
            if not candidate.is_file():
                continue
            logger.debug("Loading format description %s", candidate)
            try:
                text = candidate.read_text(encoding="utf-8")
            except OSError as exc:
                raise FormatDescriptionError(f"Cannot read {candidate}: {exc}") from exc
            if suffix == ".xml":
                description = parse_format_xml(text, origin)
            else:
                try:
                    data = yaml.safe_load(text)
                except yaml.YAMLError as exc:
                    raise FormatDescriptionError(f"Malformed {candidate}: {exc}") from exc
                description = parse_format_mapping(data, origin)
            description.source = candidate
            return description
    raise FormatDescriptionError(f"No format description found for origin '{origin}'")
