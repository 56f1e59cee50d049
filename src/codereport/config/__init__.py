"""Configuration loading, schema, and defaults."""

from codereport.config.loader import ConfigError, load_config
from codereport.config.schema import (
    CodeReportConfig,
    ReportSource,
    Severity,
    severity_at_or_above,
)

__all__ = [
    "CodeReportConfig",
    "ConfigError",
    "ReportSource",
    "Severity",
    "load_config",
    "severity_at_or_above",
]
