"""codereport CLI — Typer application with normalize, merge, summary, show, and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from codereport import __version__

app = typer.Typer(
    name="codereport",
    help="Normalize, merge, diff and score static-analysis reports.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _configure_logging(config_level: str = "warning", verbose: bool = False, debug: bool = False) -> None:
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = _LOG_LEVELS.get(config_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_config(config: Optional[str]):
    """Load config from the current directory, exit 2 on failure."""
    from codereport.config.loader import ConfigError, load_config

    try:
        return load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _parse_severity(value: str):
    from codereport.config.schema import Severity

    try:
        return Severity.from_string(value)
    except ValueError as exc:
        console.print(f"[bold red]Invalid severity:[/bold red] {value}")
        raise typer.Exit(code=2) from exc


# ── normalize ─────────────────────────────────────────────────────────────────


@app.command()
def normalize(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .codereport.toml"),
    src: Optional[List[str]] = typer.Option(None, "--src", help="Source directory (repeatable)"),
    checkstyle: Optional[List[str]] = typer.Option(None, "--checkstyle", help="Checkstyle XML report"),
    cpd: Optional[List[str]] = typer.Option(None, "--cpd", help="CPD XML report"),
    findbugs: Optional[List[str]] = typer.Option(None, "--findbugs", help="FindBugs/SpotBugs XML report"),
    pmd: Optional[List[str]] = typer.Option(None, "--pmd", help="PMD XML report"),
    jcoverage: Optional[List[str]] = typer.Option(None, "--jcoverage", help="JCoverage XML report"),
    cobertura: Optional[List[str]] = typer.Option(None, "--cobertura", help="Cobertura XML report"),
    generic: Optional[List[str]] = typer.Option(None, "--generic", help="Tool log as FLAVOR=PATH"),
    project_name: Optional[str] = typer.Option(None, "--project-name", help="Project name"),
    level: Optional[str] = typer.Option(None, "--level", help="Report level: prod | test | misc"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Report document to write"),
    filter: Optional[List[str]] = typer.Option(None, "--filter", help="YAML filter file (repeatable)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output with timing"),
) -> None:
    """Read tool reports and write one normalized report document."""
    from codereport.config.loader import ConfigError
    from codereport.config.schema import REPORT_LEVELS, ReportSource
    from codereport.findings.filters import apply_filters, load_filters
    from codereport.output import json_report
    from codereport.resources.registry import ResourceConflictError
    from codereport.rules.registry import TaxonomyError
    from codereport.scanner.engine import ReportNormalizer

    cfg = _load_config(config)
    _configure_logging(cfg.logging.level, verbose, debug)

    # --- CLI overrides ---
    cfg.project.source_dirs.extend(src or [])
    for fmt, paths in (
        ("checkstyle", checkstyle),
        ("cpd", cpd),
        ("findbugs", findbugs),
        ("pmd", pmd),
        ("jcoverage", jcoverage),
        ("cobertura", cobertura),
    ):
        for path in paths or []:
            cfg.reports.append(ReportSource(format=fmt, path=path))  # type: ignore[arg-type]
    for spec in generic or []:
        flavor, sep, path = spec.partition("=")
        if not sep or not flavor or not path:
            console.print(f"[bold red]Invalid --generic value:[/bold red] {spec} (expected FLAVOR=PATH)")
            raise typer.Exit(code=2)
        cfg.reports.append(ReportSource(format="generic", path=path, flavor=flavor))
    if project_name:
        cfg.project.name = project_name
    if level:
        if level not in REPORT_LEVELS:
            console.print(f"[bold red]Invalid level:[/bold red] {level}")
            raise typer.Exit(code=2)
        cfg.project.level = level  # type: ignore[assignment]

    if not cfg.reports and not cfg.project.source_dirs:
        console.print("[yellow]⚠[/yellow]  Nothing to normalize: no sources or reports configured.")
        raise typer.Exit(code=2)

    if verbose or debug:
        console.print(f"[dim]Sources: {len(cfg.project.source_dirs)}  Reports: {len(cfg.reports)}[/dim]")

    # --- Run ---
    try:
        normalizer = ReportNormalizer.from_config(cfg, Path.cwd())
        result = normalizer.run()
        filters = [rule for path in [*cfg.merge.filters, *(filter or [])] for rule in load_filters(Path(path))]
    except (ConfigError, ResourceConflictError, TaxonomyError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    report = apply_filters(result.report, filters)
    target = Path(out or cfg.output.report_file)
    json_report.write(report, target)

    console.print(
        f"[green]✓[/green] {report.total_items} findings in {len(report.files)} files "
        f"written to {target}"
    )
    if debug:
        console.print(f"[dim]Normalize duration: {result.duration_ms:.0f}ms[/dim]")
    for failed in result.failed_reports:
        console.print(f"[yellow]⚠[/yellow]  Could not process {failed} (recorded as SYS_PARSE_ERROR)")


# ── merge ─────────────────────────────────────────────────────────────────────


@app.command()
def merge(
    reports: List[Path] = typer.Argument(..., help="Report documents to merge"),
    out: Optional[str] = typer.Option(None, "--out", "-o", help="Merged report document to write"),
    filter: Optional[List[str]] = typer.Option(None, "--filter", help="YAML filter file (repeatable)"),
    old: Optional[str] = typer.Option(None, "--old", help="Previous report to diff against"),
    cpd_window: Optional[int] = typer.Option(None, "--cpd-window", help="Prefix length compared for CPD findings"),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="Exit 1 on new findings at or above this severity"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .codereport.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """Merge report documents, apply filters, and flag new findings."""
    from codereport.config.loader import ConfigError
    from codereport.findings.aggregator import ReportMerger, count_new
    from codereport.output import json_report

    cfg = _load_config(config)
    _configure_logging(cfg.logging.level, verbose, debug)
    threshold = _parse_severity(fail_on) if fail_on else None

    merger = ReportMerger(cpd_match_window=cpd_window or cfg.merge.cpd_match_window)
    for path in reports:
        merger.add_report(path)
    for path in [*cfg.merge.filters, *(filter or [])]:
        merger.add_filter(path)
    old_report = old or cfg.merge.old_report
    if old_report:
        merger.set_old_report(old_report)

    try:
        report = merger.run()
    except (ConfigError, json_report.ReportDocumentError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    target = Path(out or cfg.output.report_file)
    json_report.write(report, target)
    new_count = sum(1 for _, item in report.iter_items() if item.new)
    old_count = sum(1 for _, item in report.iter_items() if item.old)
    console.print(f"[green]✓[/green] Merged {len(reports)} report(s) into {target}")
    if merger.old_report is not None:
        console.print(f"[dim]New findings:[/dim]   {new_count}")
        console.print(f"[dim]Fixed findings:[/dim] {old_count}")

    if threshold is not None and count_new(report, threshold) > 0:
        console.print(
            f"[bold red]❌ New findings at or above '{threshold}' detected.[/bold red]"
        )
        raise typer.Exit(code=1)


# ── summary ───────────────────────────────────────────────────────────────────


@app.command()
def summary(
    report: Optional[Path] = typer.Argument(None, help="Report document (default: configured report_file)"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | sarif"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON/SARIF to file"),
    files: bool = typer.Option(True, "--files/--no-files", help="Include per-file table"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .codereport.toml"),
) -> None:
    """Print quality scores per file, package and project."""
    from codereport.findings.summary import summarize
    from codereport.output import json_report, sarif, terminal

    cfg = _load_config(config)
    _configure_logging(cfg.logging.level)
    fmt = format or cfg.output.format
    if fmt not in ("terminal", "json", "sarif"):
        console.print(f"[bold red]Invalid format:[/bold red] {fmt}")
        raise typer.Exit(code=2)

    path = report or Path(cfg.output.report_file)
    try:
        document = json_report.load(path)
    except json_report.ReportDocumentError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    report_text: Optional[str] = None
    if fmt == "terminal":
        terminal.render_summary(
            summarize(document),
            console=console,
            show_files=files and cfg.output.show_summary,
            project_name=document.name,
        )
    elif fmt == "json":
        report_text = json_report.render(document)
    else:
        report_text = sarif.render(document)

    if report_text is not None:
        if output:
            Path(output).write_text(report_text, encoding="utf-8")
            console.print(f"[dim]Report written to {output}[/dim]")
        else:
            print(report_text)


# ── show ──────────────────────────────────────────────────────────────────────


@app.command()
def show(
    report: Optional[Path] = typer.Argument(None, help="Report document (default: configured report_file)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .codereport.toml"),
) -> None:
    """List findings in a compiler-like console format."""
    from codereport.output import json_report, terminal

    cfg = _load_config(config)
    path = report or Path(cfg.output.report_file)
    try:
        document = json_report.load(path)
    except json_report.ReportDocumentError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    terminal.render_listing(document)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .codereport.toml in the current directory."""
    from codereport.config.defaults import DEFAULT_TOML
    from codereport.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"codereport {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """codereport — one quality report from many static-analysis tools."""
