"""Report merging, filtering and new/old finding detection."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from codereport.config.schema import DEFAULT_CPD_MATCH_WINDOW, Severity, severity_at_or_above
from codereport.findings.filters import FindingFilter, apply_filters, load_filters
from codereport.findings.models import Item, Origin, Report, ReportFile
from codereport.output import json_report
from codereport.rules.builtin.system import SYS_PARSE_ERROR

logger = logging.getLogger(__name__)


def prefix_match(a: Optional[str], b: Optional[str], window: int) -> bool:
    """True if both strings are at least *window* long and share that prefix."""
    if a is None or b is None or len(a) < window or len(b) < window:
        return False
    return a[:window] == b[:window]


def find_file(new_file: ReportFile, old_files: Iterable[ReportFile]) -> Optional[ReportFile]:
    """First old file with the same name, or the same class in the same package."""
    by_class = bool(new_file.classname) and new_file.package is not None
    for old_file in old_files:
        if old_file.name == new_file.name:
            return old_file
        if (
            by_class
            and old_file.classname == new_file.classname
            and old_file.package == new_file.package
        ):
            return old_file
    return None


class ReportMerger:
    """Combines report documents and tracks findings across runs.

    ``report_date`` stamps the ``since`` of every newly found item.
    """

    def __init__(
        self,
        cpd_match_window: int = DEFAULT_CPD_MATCH_WINDOW,
        report_date: Optional[datetime] = None,
    ) -> None:
        self.cpd_match_window = cpd_match_window
        self.report_date = report_date or datetime.now()
        self._reports: List[Path] = []
        self._filters: List[Path] = []
        self._old_report: Optional[Path] = None

    def add_report(self, path) -> None:
        self._reports.append(Path(path))

    def add_filter(self, path) -> None:
        self._filters.append(Path(path))

    def set_old_report(self, path) -> None:
        if self._old_report is not None:
            raise ValueError(f"Old report already set to {self._old_report}")
        self._old_report = Path(path)

    @property
    def old_report(self) -> Optional[Path]:
        return self._old_report

    # ---- pipeline ----

    def run(self) -> Report:
        """Merge, filter, and flag against the old report when one is set."""
        report = self.filter(self.merge())
        if self._old_report is not None:
            report = self.flag_new_findings(report, json_report.load(self._old_report))
        return report

    def merge(self) -> Report:
        """Concatenate the file lists of every added report document."""
        logger.debug("Merging %d report documents", len(self._reports))
        merged: Optional[Report] = None
        error_files: List[ReportFile] = []
        for path in self._reports:
            try:
                report = json_report.load(path)
            except json_report.ReportDocumentError as exc:
                logger.exception("Cannot read report document %s", path)
                error_files.append(_parse_error_file(path, exc))
                continue
            if merged is None:
                merged = Report(
                    name=report.name,
                    project_home=report.project_home,
                    created=self.report_date,
                )
            merged.files.extend(report.files)
        if merged is None:
            merged = Report(created=self.report_date)
        merged.files.extend(error_files)
        return merged

    def filter(self, report: Report) -> Report:
        """Apply the registered filter files in order."""
        rules: List[FindingFilter] = []
        for path in self._filters:
            logger.debug("Filter: %s", path)
            rules.extend(load_filters(path))
        return apply_filters(report, rules)

    # ---- diff ----

    def flag_new_findings(self, new_report: Report, old_report: Report) -> Report:
        """Mark findings absent from *old_report* as new and fixed ones as old."""
        logger.debug("Searching for new findings")
        for new_file in new_report.files:
            old_file = find_file(new_file, old_report.files)
            if old_file is None:
                self._flag_all_new(new_file.items)
            else:
                self._find_new_findings(new_file, old_file)
        return new_report

    def _find_new_findings(self, new_file: ReportFile, old_file: ReportFile) -> None:
        new_items = [item for item in new_file.items if item.tracks_age]
        old_items = [item for item in old_file.items if item.tracks_age]

        self._pair_off(new_items, old_items, self.is_same_finding)
        self._pair_off(new_items, old_items, self.is_partial_same_finding)

        self._flag_all_new(new_items)
        for item in old_items:
            item.flag_old()
            new_file.items.append(item)

    @staticmethod
    def _pair_off(new_items: List[Item], old_items: List[Item], same) -> None:
        """Remove first-fit pairs from both lists; the new item keeps the old ``since``."""
        unmatched: List[Item] = []
        for new_item in new_items:
            for index, old_item in enumerate(old_items):
                if same(new_item, old_item):
                    new_item.since = old_item.since
                    del old_items[index]
                    break
            else:
                unmatched.append(new_item)
        new_items[:] = unmatched

    def _flag_all_new(self, items: Iterable[Item]) -> None:
        for item in items:
            if item.tracks_age:
                item.flag_new(self.report_date)

    def is_same_finding(self, new_item: Item, old_item: Item) -> bool:
        if old_item.finding_type != new_item.finding_type:
            return False
        if old_item.origin == Origin.CPD:
            return old_item.line == new_item.line and prefix_match(
                old_item.message, new_item.message, self.cpd_match_window
            )
        return (
            old_item.line == new_item.line
            and old_item.column == new_item.column
            and old_item.message == new_item.message
            and old_item.counter <= new_item.counter
        )

    def is_partial_same_finding(self, new_item: Item, old_item: Item) -> bool:
        if old_item.finding_type != new_item.finding_type:
            return False
        if old_item.origin == Origin.CPD:
            return old_item.line == new_item.line or prefix_match(
                old_item.message, new_item.message, self.cpd_match_window
            )
        return (
            old_item.message == new_item.message
            and old_item.counter <= new_item.counter
        )


def count_new(report: Report, threshold: Severity) -> int:
    """Number of new findings at or above *threshold*."""
    return sum(
        1
        for _, item in report.iter_items()
        if item.new
        and item.severity is not None
        and severity_at_or_above(item.severity, threshold)
    )


def _parse_error_file(path: Path, exc: Exception) -> ReportFile:
    return ReportFile(
        name=str(path),
        items=[
            Item(
                origin=Origin.SYSTEM,
                finding_type=SYS_PARSE_ERROR.symbol,
                severity=Severity.ERROR,
                message=f"Error while reading report document '{path}' got exception: '{exc}'.",
            )
        ],
    )
