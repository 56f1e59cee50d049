"""Pattern classifier for free-text tool logs.

Scan positions are plain integers passed in and returned; the classifier
keeps no cursor of its own.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from codereport.findings.models import Item
from codereport.rules.models import GenericFindingType, priority_order

logger = logging.getLogger(__name__)

MAX_DEBUG_TEXT_CHARS = 100

# Anchored by ``match(content, pos)``; the code line may be empty.
CODE_LINE_PATTERN = re.compile(r"[^\n]*")
CARET_LINE_PATTERN = re.compile(r"\s*\^$", re.MULTILINE)


def trim(text: str, limit: int = MAX_DEBUG_TEXT_CHARS) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


@dataclass(frozen=True)
class ClassifyResult:
    """``item`` is ``None`` when no type matched; ``pos`` is where scanning resumes."""

    item: Optional[Item]
    pos: int


def _group_int(match: re.Match, index: Optional[int]) -> Optional[int]:
    value = _group(match, index)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _group(match: re.Match, index: Optional[int]) -> Optional[str]:
    if index is None or index > (match.re.groups or 0):
        return None
    return match.group(index)


def create_item(finding_type: GenericFindingType, match: re.Match) -> Item:
    """Build an item from a finding-type match, filling only the configured fields."""
    message = _group(match, finding_type.text_pos)
    if finding_type.text_pos is None or message is None:
        message = match.group(0)
    return Item(
        finding_type=finding_type.symbol,
        severity=finding_type.severity,
        message=message,
        line=_group_int(match, finding_type.line_start_pos),
        end_line=_group_int(match, finding_type.line_end_pos),
        column=_group_int(match, finding_type.column_start_pos),
        end_column=_group_int(match, finding_type.column_end_pos),
        source_text=_group(match, finding_type.source_text_pos),
        is_global=finding_type.is_global,
    )


class PatternClassifier:
    """Matches message text against generic finding types in priority order."""

    def __init__(self, finding_types: Sequence[GenericFindingType]) -> None:
        self.finding_types = sorted(finding_types, key=priority_order)

    def classify(self, content: str, message: str, pos: int) -> ClassifyResult:
        """Classify *message*, which starts at *pos* in *content*.

        The first type whose pattern matches a prefix of *message* wins.
        Caret-column types also consume the code line and caret line that
        follow the message.
        """
        for finding_type in self.finding_types:
            pattern = finding_type.compiled_pattern
            if pattern is None:
                continue
            match = pattern.match(message)
            if match is None:
                continue
            item = create_item(finding_type, match)
            new_pos = pos + match.end() + 1
            if finding_type.column_by_caret:
                new_pos = self._column_by_caret(content, new_pos, item)
            logger.debug(
                "For text '%s' matched finding '%s', end at %d",
                trim(message), item.finding_type, new_pos,
            )
            return ClassifyResult(item, new_pos)
        logger.debug("No finding type matched text '%s'", trim(message))
        return ClassifyResult(None, pos)

    def _column_by_caret(self, content: str, pos: int, item: Item) -> int:
        code = CODE_LINE_PATTERN.match(content, pos)
        caret_start = code.end() + 1
        caret = CARET_LINE_PATTERN.match(content, caret_start)
        if caret is None:
            logger.debug(
                "Caret defined but not found for '%s', text: '%s'",
                item.finding_type, trim(content[caret_start:caret_start + MAX_DEBUG_TEXT_CHARS]),
            )
            return pos
        item.column = caret.end() - caret_start
        return caret.end() + 1
