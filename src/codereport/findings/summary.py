"""Quality scoring for files, packages and whole reports.

Quality starts from a budget of ``loc * PENALTY_SCALE`` points and every
finding subtracts its severity's penalty. Uncovered lines count as
COVERAGE violations. Percentage bars split 100% between the penalized
severities and OK.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from codereport.config.schema import MAX_PERCENTAGE, PENALTY_SCALE, Severity
from codereport.findings.models import Item, Origin, Report, ReportFile
from codereport.findings.occurrences import FindingsSummary

SEVERITIES: List[Severity] = list(Severity)

# Severities that get a share of the percentage bar, worst first.
BAR_SEVERITIES = [
    Severity.ERROR,
    Severity.CPD,
    Severity.WARNING,
    Severity.DESIGN,
    Severity.COVERAGE,
    Severity.CODE_STYLE,
]


def _unweighted_quality(loc: int, violations: Sequence[int]) -> int:
    quality = loc * PENALTY_SCALE
    for severity in SEVERITIES:
        if quality <= 0:
            break
        quality -= violations[severity.ordinal] * severity.penalty
    if quality < 0:
        return 0
    return quality // PENALTY_SCALE


def calculate_quality(loc: int, violations: Sequence[int]) -> float:
    """Quality in percent, 0 for empty files.

    >>> calculate_quality(100, [0, 0, 0, 0, 0, 0, 0, 0, 1])
    90.0
    """
    if len(violations) != len(SEVERITIES):
        raise ValueError("Violations array length must match number of severities")
    if loc <= 0:
        return 0.0
    return _unweighted_quality(loc, violations) * MAX_PERCENTAGE / loc


def _percentage(part: int, whole: int) -> int:
    return 0 if whole == 0 else part * MAX_PERCENTAGE // whole


class FileSummary:
    """Counters for one file, one package, or the whole project."""

    def __init__(
        self,
        classname: str,
        package: Optional[str],
        name: Optional[str] = None,
        loc: int = 0,
        with_coverage: bool = False,
    ) -> None:
        self.classname = classname
        self.package = package
        self.name = name
        self.files = 0
        self.loc = loc
        self.covered_loc = 0
        self.violations = [0] * len(SEVERITIES)
        self.with_coverage = with_coverage
        self._percent: Optional[List[int]] = None

    @classmethod
    def for_global(cls, name: str = "Global Summary") -> "FileSummary":
        return cls(name, "all")

    @classmethod
    def for_package(cls, name: str) -> "FileSummary":
        return cls("Package Summary", name)

    @classmethod
    def for_file(cls, classname: str, package: Optional[str], name: str, loc: int) -> "FileSummary":
        return cls(classname, package, name, loc)

    # ---- accumulation ----

    def add_violation(self, severity: Severity) -> None:
        self._percent = None
        self.violations[severity.ordinal] += 1

    def add_covered_line(self) -> None:
        self._percent = None
        self.covered_loc += 1

    def add_item(self, item: Item) -> None:
        """Count *item*; coverage hits count as covered lines, not violations."""
        if item.severity is None:
            return
        if item.severity == Severity.COVERAGE:
            if item.counter > 0:
                self.add_covered_line()
            return
        self.add_violation(item.severity)

    def set_coverage_data(self) -> None:
        """Mark coverage as measured; lines without hits become COVERAGE violations."""
        self._percent = None
        self.with_coverage = True
        self.violations[Severity.COVERAGE.ordinal] = max(self.loc - self.covered_loc, 0)

    def add(self, other: "FileSummary") -> None:
        for i, count in enumerate(other.violations):
            self.violations[i] += count
        self.loc += other.loc
        self.covered_loc += other.covered_loc
        self._percent = None
        self.files += 1
        if other.with_coverage or self.covered_loc > 0 or self.not_covered_loc > 0:
            self.with_coverage = True

    # ---- derived values ----

    @property
    def not_covered_loc(self) -> int:
        return self.violations[Severity.COVERAGE.ordinal]

    @property
    def full_class_name(self) -> str:
        if not self.package:
            return self.classname
        return f"{self.package}.{self.classname}"

    def get_violations(self, severity: Severity) -> int:
        return self.violations[severity.ordinal]

    def get_quality(self) -> float:
        return calculate_quality(self.loc, self.violations)

    def get_coverage(self) -> int:
        """Covered percentage; any uncovered share counts as at least 1%."""
        not_covered = self.not_covered_loc
        if self.covered_loc:
            percent = not_covered * MAX_PERCENTAGE // (self.covered_loc + not_covered)
            if percent == 0 and not_covered > 0:
                percent = 1
        elif not_covered > 0:
            percent = MAX_PERCENTAGE
        else:
            percent = 0
        return MAX_PERCENTAGE - percent

    def get_coverage_as_float(self) -> float:
        total = self.covered_loc + self.not_covered_loc
        if total:
            return self.covered_loc * 100.0 / total
        return 100.0

    def get_number_of_findings(self) -> int:
        return sum(
            self.violations[s.ordinal]
            for s in SEVERITIES
            if Severity.INFO.ordinal <= s.ordinal <= Severity.ERROR.ordinal
            and s != Severity.COVERAGE
        )

    def get_percent(self, severity: Severity) -> int:
        if self._percent is None:
            self._percent = self.do_calc_percent()
        return self._percent[severity.ordinal]

    def percentages(self) -> Dict[Severity, int]:
        """Non-zero bar shares, OK included."""
        return {s: self.get_percent(s) for s in SEVERITIES if self.get_percent(s) > 0}

    def do_calc_percent(self) -> List[int]:
        percent = [0] * len(SEVERITIES)
        remaining = MAX_PERCENTAGE
        if self.loc:
            for severity in BAR_SEVERITIES:
                count = self.violations[severity.ordinal]
                if severity == Severity.COVERAGE:
                    share = self._coverage_percent()
                else:
                    share = _percentage(count * severity.penalty, self.loc * PENALTY_SCALE)
                if count > 0 and share == 0:
                    share = 1
                share = min(share, remaining)
                percent[severity.ordinal] = share
                remaining -= share
        percent[Severity.OK.ordinal] = remaining
        return percent

    def _coverage_percent(self) -> int:
        if not self.with_coverage:
            return 0
        not_covered = self.not_covered_loc
        return _percentage(
            not_covered * Severity.COVERAGE.penalty,
            PENALTY_SCALE * (self.covered_loc + not_covered),
        )

    def __repr__(self) -> str:
        shares = ", ".join(f"{s}:{self.violations[s.ordinal]}" for s in SEVERITIES if self.violations[s.ordinal])
        return f"FileSummary({self.full_class_name!r}, loc={self.loc}, {shares})"


# ---- sort keys ----


def by_package(summary: FileSummary):
    return (summary.package or "", summary.classname or "")


def by_quality(summary: FileSummary):
    return (summary.get_quality(), by_package(summary))


def by_coverage(summary: FileSummary):
    return (summary.get_coverage_as_float(), -summary.not_covered_loc, by_package(summary))


@dataclass
class ReportSummary:
    project: FileSummary
    packages: Dict[str, FileSummary] = field(default_factory=dict)
    files: List[FileSummary] = field(default_factory=list)
    findings: FindingsSummary = field(default_factory=FindingsSummary)


def _has_coverage(report: Report) -> bool:
    return any(item.origin == Origin.COVERAGE for _, item in report.iter_items())


def summarize_file(report_file: ReportFile, with_coverage: bool = False) -> FileSummary:
    summary = FileSummary.for_file(
        report_file.classname, report_file.package, report_file.name, report_file.loc
    )
    summary.files = 1
    for item in report_file.items:
        summary.add_item(item)
    if with_coverage and report_file.classname:
        summary.set_coverage_data()
    return summary


def summarize(report: Report) -> ReportSummary:
    """Score every file, package and the project of *report*.

    Coverage is only accounted for when the report holds coverage items,
    and only for class files.
    """
    with_coverage = _has_coverage(report)
    result = ReportSummary(project=FileSummary.for_global())
    for report_file in report.files:
        file_summary = summarize_file(report_file, with_coverage)
        result.files.append(file_summary)
        package = report_file.package or ""
        if package not in result.packages:
            result.packages[package] = FileSummary.for_package(package)
        result.packages[package].add(file_summary)
        result.project.add(file_summary)
        for item in report_file.items:
            result.findings.add(report_file.name, item)
    return result
