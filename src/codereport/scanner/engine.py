"""Report normalizer — runs every reader and builds one report document.

Failure policy: a report that cannot be processed becomes a
``SYS_PARSE_ERROR`` finding on that report's path and the remaining
reports are still read. Resource conflicts are fatal.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from codereport.config.schema import CodeReportConfig, Severity
from codereport.findings.models import Item, Origin, Report, ReportFile
from codereport.readers.base import ItemMap
from codereport.readers.factory import create_reader
from codereport.resources.models import ResourceInfo
from codereport.resources.registry import ResourceConflictError, ResourceRegistry
from codereport.rules.builtin.system import SYS_ERROR, SYS_PARSE_ERROR
from codereport.rules.registry import FindingTaxonomy, build_taxonomy

logger = logging.getLogger(__name__)

SOURCES = "sources"


@dataclass
class NormalizeResult:
    items: ItemMap = field(default_factory=dict)
    report: Report = field(default_factory=Report)
    duration_ms: float = 0.0
    failed_reports: List[str] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return sum(len(items) for items in self.items.values())


class ReportNormalizer:
    """Collects source directories and tool reports, then normalizes them.

    Source directories are always read before reports so that every
    reader can resolve file names against the registry.
    """

    def __init__(
        self,
        config: Optional[CodeReportConfig] = None,
        registry: Optional[ResourceRegistry] = None,
        taxonomy: Optional[FindingTaxonomy] = None,
    ) -> None:
        self.config = config or CodeReportConfig()
        self.registry = registry if registry is not None else ResourceRegistry()
        self.taxonomy = taxonomy if taxonomy is not None else FindingTaxonomy()
        self._sources: List[Path] = []
        self._reports: List[Tuple[str, Path, Optional[str]]] = []

    @classmethod
    def from_config(cls, config: CodeReportConfig, project_root: Path) -> "ReportNormalizer":
        """Build a normalizer with the sources and reports listed in *config*."""
        normalizer = cls(config, taxonomy=build_taxonomy(config, project_root))
        for source_dir in config.project.source_dirs:
            normalizer.add_source(_resolve(project_root, source_dir))
        for source in config.reports:
            normalizer.add_report(source.format, _resolve(project_root, source.path), source.flavor)
        return normalizer

    def add_source(self, path) -> None:
        self._sources.append(Path(path))

    def add_report(self, format: str, path, flavor: Optional[str] = None) -> None:
        self._reports.append((format, Path(path), flavor))

    def run(self) -> NormalizeResult:
        start = time.perf_counter()
        logger.debug("Running report normalizer on %d reports", len(self._reports))
        result = NormalizeResult()

        for path in self._sources:
            self._handle(SOURCES, path, None, result)
        for format, path, flavor in self._reports:
            self._handle(format, path, flavor, result)

        result.report = self.build_report(result.items)
        result.duration_ms = round((time.perf_counter() - start) * 1000, 2)
        return result

    def _handle(self, format: str, path: Path, flavor: Optional[str], result: NormalizeResult) -> None:
        logger.debug("Processing report %s '%s'", format, path)
        try:
            if not path.is_dir() and path.is_file() and path.stat().st_size == 0:
                logger.debug("Good job, no findings reported by %s", format)
                return
            reader = create_reader(format, self.registry, self.taxonomy, flavor)
            reader.parse(path)
            reader.merge_into(result.items)
        except ResourceConflictError:
            raise
        except Exception as exc:
            logger.exception("Error while processing %s '%s'", format, path)
            result.failed_reports.append(str(path))
            self._add_parse_error(format, path, exc, result.items)

    def _add_parse_error(self, format: str, path: Path, exc: Exception, items: ItemMap) -> None:
        label = format if format != SOURCES else "source directory"
        item = Item(
            origin=Origin.SYSTEM,
            finding_type=SYS_PARSE_ERROR.symbol,
            severity=Severity.ERROR,
            message=f"Error while processing '{label}' '{path}' got exception: '{exc}'.",
        )
        name = os.path.abspath(path)
        resource = self.registry.lookup(name) or self.registry.register(name, "", name)
        items.setdefault(resource, []).append(item)

    def build_report(self, items: ItemMap) -> Report:
        """Turn the item map into a report document."""
        project = self.config.project
        report = Report(
            name=project.name,
            project_home=os.path.abspath(project.home),
            created=datetime.now(),
        )
        global_items: List[Item] = []
        for resource, resource_items in sorted(
            items.items(), key=lambda entry: entry[0].name if entry[0] is not None else ""
        ):
            if resource is None:
                global_items.extend(resource_items)
                continue
            report.files.append(_report_file(resource, resource_items, project.level))
        if global_items:
            report.files.append(ReportFile(name="", level=project.level, items=global_items))
        return report


def _report_file(resource: ResourceInfo, items: List[Item], level: str) -> ReportFile:
    return ReportFile(
        name=resource.name,
        classname=resource.classname,
        package=resource.package,
        src_dir=resource.source_dir,
        loc=resource.lines_of_code,
        level=level,
        items=list(items),
    )


def _resolve(root: Path, path: str) -> Path:
    p = Path(path)
    return p if p.is_absolute() else root / p


def add_system_level_issue(report: Report, message: str, resource: Optional[ResourceInfo] = None) -> Item:
    """Attach a ``SYS_ERROR`` finding to *resource* (the global entry if ``None``)."""
    item = Item(
        origin=Origin.SYSTEM,
        finding_type=SYS_ERROR.symbol,
        severity=Severity.ERROR,
        message=message,
        is_global=resource is None,
    )
    name = resource.name if resource is not None else ""
    for report_file in report.files:
        if report_file.name == name:
            report_file.items.append(item)
            return item
    if resource is not None:
        report_file = ReportFile(
            name=resource.name,
            classname=resource.classname,
            package=resource.package,
            src_dir=resource.source_dir,
            loc=resource.lines_of_code,
        )
    else:
        report_file = ReportFile(name="")
    report_file.items.append(item)
    report.files.append(report_file)
    return item
