"""Configuration schema — severity scale and dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal, Optional

PENALTY_SCALE = 10
MAX_PERCENTAGE = 100


class Severity(str, Enum):
    """Ordered impact classification; declaration order is the ordinal."""

    FILTERED = "filtered"
    OK = "ok"
    INFO = "info"
    CODE_STYLE = "code-style"
    COVERAGE = "coverage"
    DESIGN = "design"
    WARNING = "warning"
    CPD = "cpd"
    ERROR = "error"

    @property
    def ordinal(self) -> int:
        return _ORDINALS[self]

    @property
    def penalty(self) -> int:
        return SEVERITY_PENALTY[self]

    @classmethod
    def from_string(cls, value: str) -> "Severity":
        """Parse a severity name (case-insensitive, ``_`` accepted for ``-``)."""
        key = value.strip().lower().replace("_", "-")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Illegal severity name: {value!r}") from None

    @classmethod
    def from_ordinal(cls, ordinal: int) -> "Severity":
        return _BY_ORDINAL[ordinal]

    def __str__(self) -> str:
        return self.value


_BY_ORDINAL: List[Severity] = list(Severity)
_ORDINALS: Dict[Severity, int] = {s: i for i, s in enumerate(_BY_ORDINAL)}

SEVERITY_PENALTY: Dict[Severity, int] = {
    Severity.FILTERED: 0,
    Severity.OK: 0,
    Severity.INFO: 0,
    Severity.CODE_STYLE: 5,
    Severity.COVERAGE: 8,
    Severity.DESIGN: 30,
    Severity.WARNING: 50,
    Severity.CPD: 100,
    Severity.ERROR: 100,
}


def severity_at_or_above(finding_sev: Severity, threshold: Severity) -> bool:
    """Return True if *finding_sev* is at or above *threshold*."""
    return finding_sev.ordinal >= threshold.ordinal


ReportFormat = Literal[
    "checkstyle", "cpd", "findbugs", "pmd", "jcoverage", "cobertura", "generic"
]

REPORT_FORMATS = ("checkstyle", "cpd", "findbugs", "pmd", "jcoverage", "cobertura", "generic")

ReportLevel = Literal["prod", "test", "misc"]

REPORT_LEVELS = ("prod", "test", "misc")

# len("Copied and pasted code. 341 equal")
DEFAULT_CPD_MATCH_WINDOW = 33


@dataclass
class ProjectConfig:
    name: str = "Unknown Project"
    home: str = "."
    source_dirs: List[str] = field(default_factory=list)
    level: ReportLevel = "prod"


@dataclass
class ReportSource:
    """One tool report fed to the normalizer."""

    format: ReportFormat
    path: str
    flavor: Optional[str] = None  # generic origin name


@dataclass
class MergeConfig:
    cpd_match_window: int = DEFAULT_CPD_MATCH_WINDOW
    filters: List[str] = field(default_factory=list)
    old_report: Optional[str] = None


@dataclass
class TaxonomyConfig:
    format_dirs: List[str] = field(default_factory=list)
    custom_types_dir: str = ".codereport-types"
    findbugs_messages: List[str] = field(default_factory=list)
    pmd_rulesets: List[str] = field(default_factory=list)


@dataclass
class OutputConfig:
    format: Literal["terminal", "json", "sarif"] = "terminal"
    show_summary: bool = True
    report_file: str = "codereport.json"


@dataclass
class LoggingConfig:
    level: Literal["debug", "info", "warning", "error"] = "warning"


@dataclass
class CodeReportConfig:
    version: str = "1.0"
    project: ProjectConfig = field(default_factory=ProjectConfig)
    reports: List[ReportSource] = field(default_factory=list)
    merge: MergeConfig = field(default_factory=MergeConfig)
    taxonomy: TaxonomyConfig = field(default_factory=TaxonomyConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
