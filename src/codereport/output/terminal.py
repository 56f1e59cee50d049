"""Rich terminal reporter — quality tables, percentage bars, finding listing."""

from __future__ import annotations

import os
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from codereport.config.schema import Severity
from codereport.findings.models import Report
from codereport.findings.summary import FileSummary, ReportSummary, by_quality

BAR_WIDTH = 20
SEVERITY_INDENT = 10

_SEVERITY_STYLE = {
    Severity.OK: "green",
    Severity.CODE_STYLE: "bright_cyan",
    Severity.COVERAGE: "magenta",
    Severity.DESIGN: "yellow",
    Severity.WARNING: "dark_orange",
    Severity.CPD: "bright_red",
    Severity.ERROR: "bold red",
}


def _quality_style(quality: float) -> str:
    if quality >= 90:
        return "bold green"
    if quality >= 70:
        return "yellow"
    return "bold red"


def percent_bar(summary: FileSummary, width: int = BAR_WIDTH) -> Text:
    """A bar of *width* cells split by the summary's severity percentages."""
    bar = Text()
    used = 0
    shares = [(s, p) for s, p in summary.percentages().items() if s != Severity.OK]
    for severity, percent in shares:
        cells = max(1, percent * width // 100)
        cells = min(cells, width - used)
        bar.append("█" * cells, style=_SEVERITY_STYLE.get(severity, ""))
        used += cells
    bar.append("█" * (width - used), style=_SEVERITY_STYLE[Severity.OK])
    return bar


def _summary_row(table: Table, label: str, summary: FileSummary) -> None:
    quality = summary.get_quality()
    table.add_row(
        label,
        str(summary.loc),
        str(summary.get_number_of_findings()),
        Text(f"{quality:.2f}%", style=_quality_style(quality)),
        f"{summary.get_coverage_as_float():.2f}%" if summary.with_coverage else "-",
        percent_bar(summary),
    )


def _new_table(title: str, first: str) -> Table:
    table = Table(title=title, title_style="bold", border_style="dim")
    table.add_column(first, style="cyan", min_width=20)
    table.add_column("LOC", justify="right")
    table.add_column("Findings", justify="right")
    table.add_column("Quality", justify="right")
    table.add_column("Coverage", justify="right")
    table.add_column("Bar", no_wrap=True)
    return table


def render_summary(
    summary: ReportSummary,
    *,
    console: Optional[Console] = None,
    show_files: bool = True,
    project_name: str = "",
) -> None:
    """Print project, package and (optionally) file quality tables."""
    console = console or Console(stderr=True)

    packages = _new_table("Packages", "Package")
    for name in sorted(summary.packages):
        _summary_row(packages, name or "(default)", summary.packages[name])
    console.print(packages)

    if show_files and summary.files:
        files = _new_table("Files (worst first)", "Class")
        for file_summary in sorted(summary.files, key=by_quality):
            _summary_row(files, file_summary.full_class_name or file_summary.name or "(global)", file_summary)
        console.print(files)

    project = summary.project
    console.print()
    console.print(f"[bold]{project_name or project.classname}[/bold]")
    console.print(f"[dim]Files:[/dim]     {project.files}")
    console.print(f"[dim]LOC:[/dim]       {project.loc}")
    console.print(f"[dim]Findings:[/dim]  {project.get_number_of_findings()}")
    quality = project.get_quality()
    console.print(f"[dim]Quality:[/dim]   [{_quality_style(quality)}]{quality:.2f}%[/]")
    if project.with_coverage:
        console.print(f"[dim]Coverage:[/dim]  {project.get_coverage_as_float():.2f}%")
    top = summary.findings.types()[:5]
    if top:
        console.print("[dim]Top finding types:[/dim]")
        for symbol in top:
            console.print(
                f"  [cyan]{symbol}[/cyan] {summary.findings.total_for_type(symbol)} "
                f"in {summary.findings.files_for_type(symbol)} file(s)"
            )


def format_listing(report: Report) -> List[str]:
    """Two lines per reportable finding, in a stack-trace like layout."""
    lines: List[str] = []
    for report_file in sorted(report.files, key=lambda f: (f.package or "", f.classname, f.name)):
        basename = os.path.basename(report_file.name) if report_file.name else "global"
        for item in sorted(report_file.items, key=lambda i: (i.line or 0, i.column or 0)):
            if item.severity in (None, Severity.OK, Severity.FILTERED, Severity.COVERAGE):
                continue
            owner = report_file.full_classname or basename
            lines.append(f"{str(item.severity):<{SEVERITY_INDENT}}: {item.message or ''}")
            lines.append(f"  at {owner}.{item.finding_type}({basename}:{item.line or 0})")
    return lines


def render_listing(report: Report, *, console: Optional[Console] = None) -> int:
    """Print the finding listing. Returns the number of findings printed."""
    console = console or Console()
    lines = format_listing(report)
    for line in lines:
        console.print(line, markup=False, highlight=False, soft_wrap=True)
    return len(lines) // 2
