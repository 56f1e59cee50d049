"""Load and merge configuration from .codereport.toml, CLI flags, and env vars."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from codereport.config.schema import (
    REPORT_FORMATS,
    REPORT_LEVELS,
    CodeReportConfig,
    LoggingConfig,
    MergeConfig,
    OutputConfig,
    ProjectConfig,
    ReportSource,
    TaxonomyConfig,
)

CONFIG_FILENAME = ".codereport.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(project_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = project_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: CodeReportConfig) -> None:
    """Apply CODEREPORT_* environment variable overrides."""
    if val := os.environ.get("CODEREPORT_FORMAT"):
        if val in ("terminal", "json", "sarif"):
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("CODEREPORT_PROJECT_NAME"):
        cfg.project.name = val
    if val := os.environ.get("CODEREPORT_SOURCE_DIRS"):
        cfg.project.source_dirs.extend(p.strip() for p in val.split(os.pathsep) if p.strip())
    if val := os.environ.get("CODEREPORT_CPD_WINDOW"):
        try:
            window = int(val)
        except ValueError:
            window = 0
        if window > 0:
            cfg.merge.cpd_match_window = window
    if val := os.environ.get("CODEREPORT_LOG_LEVEL"):
        if val.lower() in ("debug", "info", "warning", "error"):
            cfg.logging.level = val.lower()  # type: ignore[assignment]


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    import dataclasses

    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _build_reports(data: Dict[str, Any]) -> List[ReportSource]:
    """Build the ``[[reports]]`` array of tables."""
    entries = data.get("reports", [])
    if not isinstance(entries, list):
        raise ConfigError("[[reports]] must be an array of tables")
    reports: List[ReportSource] = []
    for index, entry in enumerate(entries, 1):
        fmt = entry.get("format")
        if fmt not in REPORT_FORMATS:
            raise ConfigError(f"reports #{index}: unknown format {fmt!r}")
        path = entry.get("path")
        if not path:
            raise ConfigError(f"reports #{index}: missing path")
        flavor = entry.get("flavor")
        if fmt == "generic" and not flavor:
            raise ConfigError(f"reports #{index}: generic reports need a flavor")
        reports.append(ReportSource(format=fmt, path=str(path), flavor=flavor))
    return reports


def load_config(
    project_root: Path,
    config_override: Optional[str] = None,
) -> CodeReportConfig:
    """Load, validate, and return a CodeReportConfig."""
    config_path = find_config_file(project_root, config_override)

    if config_path is None:
        cfg = CodeReportConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = CodeReportConfig(
            version=raw.get("version", "1.0"),
            project=_build_section(raw, ProjectConfig, "project"),
            reports=_build_reports(raw),
            merge=_build_section(raw, MergeConfig, "merge"),
            taxonomy=_build_section(raw, TaxonomyConfig, "taxonomy"),
            output=_build_section(raw, OutputConfig, "output"),
            logging=_build_section(raw, LoggingConfig, "logging"),
        )
        if cfg.project.level not in REPORT_LEVELS:
            raise ConfigError(f"Unknown report level: {cfg.project.level!r}")

    _merge_env_overrides(cfg)
    return cfg
