"""Declarative report filters.

A filter file is YAML, either a list of rules or a mapping with a
``filters`` list::

    filters:
      - match: {origin: checkstyle, finding_type: CS_TODO}
        action: drop
      - match: {file: "*/generated/*"}
        action: filter
      - match: {message: "^Missing a Javadoc comment"}
        action: {set_severity: info}

All ``match`` keys must hold for a rule to apply; an empty ``match``
applies to every finding. ``file`` and ``package`` are fnmatch globs,
``message`` is a regular expression searched in the message.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Iterable, List, Optional

import yaml

from codereport.config.loader import ConfigError
from codereport.config.schema import Severity
from codereport.findings.models import Item, Origin, Report, ReportFile

logger = logging.getLogger(__name__)

ACTIONS = ("drop", "filter", "set_severity")

_MATCH_KEYS = ("origin", "finding_type", "severity", "file", "package", "message", "level")


@dataclass(frozen=True)
class FindingFilter:
    """One match/action rule."""

    action: str
    origin: Optional[Origin] = None
    finding_type: Optional[str] = None
    severity: Optional[Severity] = None
    file: Optional[str] = None
    package: Optional[str] = None
    message: Optional[re.Pattern[str]] = None
    level: Optional[str] = None
    new_severity: Optional[Severity] = None

    def matches(self, report_file: ReportFile, item: Item) -> bool:
        if self.origin is not None and item.origin != self.origin:
            return False
        if self.finding_type is not None and item.finding_type != self.finding_type:
            return False
        if self.severity is not None and item.severity != self.severity:
            return False
        if self.file is not None and not fnmatch(report_file.name, self.file):
            return False
        if self.package is not None and not fnmatch(report_file.package or "", self.package):
            return False
        if self.message is not None and not self.message.search(item.message or ""):
            return False
        if self.level is not None and report_file.level != self.level:
            return False
        return True

    def apply(self, report_file: ReportFile) -> int:
        """Apply to every item of *report_file*. Returns the number of items hit."""
        kept: List[Item] = []
        hits = 0
        for item in report_file.items:
            if not self.matches(report_file, item):
                kept.append(item)
                continue
            hits += 1
            if self.action == "drop":
                continue
            if self.action == "filter":
                item.severity = Severity.FILTERED
            else:
                item.severity = self.new_severity
            kept.append(item)
        report_file.items = kept
        return hits


def _parse_rule(entry: Any, source: str) -> FindingFilter:
    if not isinstance(entry, dict):
        raise ConfigError(f"{source}: filter rule must be a mapping, got {entry!r}")
    match = entry.get("match") or {}
    if not isinstance(match, dict):
        raise ConfigError(f"{source}: 'match' must be a mapping")
    unknown = set(match) - set(_MATCH_KEYS)
    if unknown:
        raise ConfigError(f"{source}: unknown match keys {sorted(unknown)}")

    action = entry.get("action")
    new_severity = None
    if isinstance(action, dict) and "set_severity" in action:
        new_severity = action["set_severity"]
        action = "set_severity"
    elif "set_severity" in entry:
        new_severity = entry["set_severity"]
        action = "set_severity"
    if action not in ACTIONS:
        raise ConfigError(f"{source}: invalid action {action!r} (expected one of {', '.join(ACTIONS)})")

    try:
        return FindingFilter(
            action=action,
            origin=Origin.from_string(match["origin"]) if "origin" in match else None,
            finding_type=match.get("finding_type"),
            severity=Severity.from_string(match["severity"]) if "severity" in match else None,
            file=match.get("file"),
            package=match.get("package"),
            message=re.compile(match["message"]) if "message" in match else None,
            level=match.get("level"),
            new_severity=Severity.from_string(new_severity) if new_severity is not None else None,
        )
    except (ValueError, re.error, AttributeError) as exc:
        raise ConfigError(f"{source}: {exc}") from exc


def load_filters(path: Path) -> List[FindingFilter]:
    """Read the filter rules in *path*."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read filter file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed filter file {path}: {exc}") from exc

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("filters", [])
    if not isinstance(data, list):
        raise ConfigError(f"Filter file {path} must hold a list of rules")
    return [_parse_rule(entry, str(path)) for entry in data]


def apply_filters(report: Report, filters: Iterable[FindingFilter]) -> Report:
    """Apply *filters* in order to every file of *report* (in place)."""
    for rule in filters:
        hits = sum(rule.apply(report_file) for report_file in report.files)
        logger.debug("Filter %s matched %d findings", rule.action, hits)
    return report
