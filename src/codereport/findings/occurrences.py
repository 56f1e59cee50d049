"""Flat occurrence table: where each finding type shows up, and how often."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

from codereport.config.schema import Severity
from codereport.findings.models import Item

OccurrenceKey = Tuple[str, Severity, str]


@dataclass
class Occurrence:
    finding_type: str
    severity: Severity
    resource: str
    lines: List[int] = field(default_factory=list)
    count: int = 0


class FindingsSummary:
    """Occurrences keyed by ``(finding_type, severity, resource name)``."""

    def __init__(self) -> None:
        self._table: Dict[OccurrenceKey, Occurrence] = {}

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[Occurrence]:
        return iter(self._table.values())

    def add(self, resource: str, item: Item) -> None:
        """Record *item*; OK and coverage items are not findings and are skipped."""
        if item.severity is None or item.severity in (Severity.OK, Severity.COVERAGE):
            return
        symbol = item.finding_type or ""
        key = (symbol, item.severity, resource)
        entry = self._table.get(key)
        if entry is None:
            entry = self._table[key] = Occurrence(symbol, item.severity, resource)
        entry.count += 1
        if item.line is not None:
            entry.lines.append(item.line)

    def get(self, finding_type: str, severity: Severity, resource: str) -> Optional[Occurrence]:
        return self._table.get((finding_type, severity, resource))

    def total_for_type(self, finding_type: str) -> int:
        return sum(e.count for e in self._table.values() if e.finding_type == finding_type)

    def files_for_type(self, finding_type: str) -> int:
        return len({e.resource for e in self._table.values() if e.finding_type == finding_type})

    def total_for_severity(self, severity: Severity) -> int:
        return sum(e.count for e in self._table.values() if e.severity == severity)

    def types(self) -> List[str]:
        """Finding types by highest severity, then occurrence count (both descending), then symbol."""
        worst: Dict[str, int] = {}
        counts: Dict[str, int] = {}
        for e in self._table.values():
            worst[e.finding_type] = max(worst.get(e.finding_type, 0), e.severity.ordinal)
            counts[e.finding_type] = counts.get(e.finding_type, 0) + e.count
        return sorted(worst, key=lambda t: (-worst[t], -counts[t], t))

    def resources_for_type(self, finding_type: str) -> Set[str]:
        return {e.resource for e in self._table.values() if e.finding_type == finding_type}
