"""Source-file identity model."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

JAVA_SUFFIX = ".java"


def class_name_for(name: str) -> str:
    """Derive the class name from a ``.java`` path ("" for other files)."""
    if not name.endswith(JAVA_SUFFIX):
        return ""
    return os.path.basename(name)[: -len(JAVA_SUFFIX)]


def count_lines(path: str) -> int:
    with open(path, encoding="utf-8", errors="replace") as f:
        return sum(1 for _ in f)


@dataclass(frozen=True)
class ResourceInfo:
    """One logical source file.

    Identity is the ``(name, package, source_dir)`` triple; the line count
    is read from disk on first access.
    """

    name: str
    package: str = ""
    source_dir: str = ""

    _lines_of_code: Optional[int] = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def classname(self) -> str:
        return class_name_for(self.name)

    @property
    def full_classname(self) -> str:
        if self.package:
            return f"{self.package}.{self.classname}"
        return self.classname

    @property
    def lines_of_code(self) -> int:
        if self._lines_of_code is None:
            try:
                loc = count_lines(self.name)
            except OSError:
                logger.debug("Cannot read resource %s, counting 0 lines", self.name)
                loc = 0
            object.__setattr__(self, "_lines_of_code", loc)
        return self._lines_of_code
