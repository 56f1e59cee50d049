"""Finding models, occurrence tables, and scoring."""

from codereport.findings.models import Item, Origin, Report, ReportFile
from codereport.findings.occurrences import FindingsSummary
from codereport.findings.summary import FileSummary, ReportSummary, calculate_quality, summarize

__all__ = [
    "FileSummary",
    "FindingsSummary",
    "Item",
    "Origin",
    "Report",
    "ReportFile",
    "ReportSummary",
    "calculate_quality",
    "summarize",
]
