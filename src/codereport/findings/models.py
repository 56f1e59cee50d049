"""Finding and report document data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from codereport.config.schema import Severity


class Origin(str, Enum):
    """The analysis tool a finding came from."""

    CHECKSTYLE = "checkstyle"
    FINDBUGS = "findbugs"
    PMD = "pmd"
    CPD = "cpd"
    COVERAGE = "coverage"
    SYSTEM = "system"
    JAVADOC = "javadoc"
    JAVAC = "javac"
    GENERIC = "generic"

    @classmethod
    def from_string(cls, value: str) -> "Origin":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown origin: {value!r}") from None

    @property
    def is_generic(self) -> bool:
        """True for log-based origins classified by a format description."""
        return self in GENERIC_ORIGINS

    def __str__(self) -> str:
        return self.value


GENERIC_ORIGINS = frozenset({Origin.JAVADOC, Origin.JAVAC, Origin.GENERIC})


@dataclass
class Item:
    """One normalized finding.

    Position fields are ``None`` when the tool did not report them.
    ``new`` and ``old`` are mutually exclusive diff markers.
    """

    origin: Optional[Origin] = None
    finding_type: Optional[str] = None
    severity: Optional[Severity] = None
    message: Optional[str] = None
    line: Optional[int] = None
    end_line: Optional[int] = None
    column: Optional[int] = None
    end_column: Optional[int] = None
    counter: int = 0
    since: Optional[datetime] = None
    new: bool = False
    old: bool = False
    source_text: Optional[str] = None
    is_global: bool = False

    @property
    def penalty(self) -> int:
        return self.severity.penalty if self.severity is not None else 0

    @property
    def tracks_age(self) -> bool:
        """True if the item takes part in new/old tracking."""
        return self.penalty > 0 and self.severity != Severity.COVERAGE

    def flag_new(self, when: datetime) -> None:
        self.old = False
        self.new = True
        self.since = when

    def flag_old(self) -> None:
        self.severity = Severity.OK
        self.new = False
        self.old = True


@dataclass
class ReportFile:
    """Per-file entry of a report document."""

    name: str
    classname: str = ""
    package: Optional[str] = None
    src_dir: Optional[str] = None
    loc: int = 0
    level: str = "prod"
    items: List[Item] = field(default_factory=list)

    @property
    def full_classname(self) -> str:
        if self.package:
            return f"{self.package}.{self.classname}"
        return self.classname


@dataclass
class Report:
    """A report snapshot: every file with its findings for one run."""

    name: str = "Unknown Project"
    project_home: str = "."
    created: datetime = field(default_factory=datetime.now)
    files: List[ReportFile] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return sum(len(f.items) for f in self.files)

    def iter_items(self):
        for report_file in self.files:
            for item in report_file.items:
                yield report_file, item
