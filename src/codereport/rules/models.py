"""Finding-type descriptors — pattern stored as string, compiled on first use."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

from codereport.config.schema import Severity
from codereport.findings.models import Origin


@dataclass(frozen=True)
class FindingType:
    """A finding-type descriptor.

    ``pattern`` is kept as a raw string so descriptors stay serialisable;
    the compiled regex is built lazily via ``compiled_pattern``.
    """

    symbol: str
    short_text: str = ""
    description: str = ""
    severity: Optional[Severity] = None
    pattern: Optional[str] = None
    origin: Optional[Origin] = None

    _compiled_pattern: Optional[re.Pattern[str]] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not self.short_text:
            object.__setattr__(self, "short_text", self.symbol)
        if not self.description:
            object.__setattr__(self, "description", self.short_text)

    @property
    def compiled_pattern(self) -> Optional[re.Pattern[str]]:
        if self.pattern is None:
            return None
        if self._compiled_pattern is None:
            object.__setattr__(self, "_compiled_pattern", re.compile(self.pattern))
        return self._compiled_pattern

    def matches(self, message: str) -> bool:
        """Full-match *message* against the template pattern."""
        cp = self.compiled_pattern
        return cp is not None and cp.fullmatch(message) is not None


@dataclass(frozen=True)
class GenericFindingType(FindingType):
    """A descriptor for log-based origins.

    Group positions are capture-group indices into ``pattern``; ``None``
    means the field is not extracted.
    """

    priority: int = 0
    text_pos: Optional[int] = None
    line_start_pos: Optional[int] = None
    line_end_pos: Optional[int] = None
    column_start_pos: Optional[int] = None
    column_end_pos: Optional[int] = None
    source_text_pos: Optional[int] = None
    column_by_caret: bool = False
    is_global: bool = False

    @property
    def compiled_pattern(self) -> Optional[re.Pattern[str]]:
        if self.pattern is None:
            return None
        if self._compiled_pattern is None:
            object.__setattr__(
                self, "_compiled_pattern", re.compile(self.pattern, re.MULTILINE)
            )
        return self._compiled_pattern


def priority_order(finding_type: GenericFindingType):
    """Sort key: priority descending, then symbol."""
    return (-finding_type.priority, finding_type.symbol)
