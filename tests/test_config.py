"""Tests for config loading, validation, env var overrides, and the severity scale."""

import os
from pathlib import Path

import pytest

from codereport.config.loader import ConfigError, load_config
from codereport.config.schema import (
    SEVERITY_PENALTY,
    Severity,
    severity_at_or_above,
)


class TestSeverity:
    def test_ordinals_follow_declaration_order(self):
        assert [s.ordinal for s in Severity] == list(range(9))
        assert Severity.FILTERED.ordinal == 0
        assert Severity.ERROR.ordinal == 8

    def test_penalties(self):
        assert [SEVERITY_PENALTY[s] for s in Severity] == [0, 0, 0, 5, 8, 30, 50, 100, 100]
        assert Severity.CPD.penalty == 100

    def test_from_string(self):
        assert Severity.from_string("Code-Style") is Severity.CODE_STYLE
        assert Severity.from_string("code_style") is Severity.CODE_STYLE
        assert Severity.from_string(" ERROR ") is Severity.ERROR

    def test_from_string_rejects_unknown(self):
        with pytest.raises(ValueError):
            Severity.from_string("critical")

    def test_from_ordinal(self):
        assert Severity.from_ordinal(4) is Severity.COVERAGE

    def test_at_or_above(self):
        assert severity_at_or_above(Severity.ERROR, Severity.WARNING) is True
        assert severity_at_or_above(Severity.WARNING, Severity.WARNING) is True
        assert severity_at_or_above(Severity.DESIGN, Severity.WARNING) is False


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg.project.name == "Unknown Project"
        assert cfg.project.level == "prod"
        assert cfg.merge.cpd_match_window == 33
        assert cfg.output.format == "terminal"
        assert cfg.reports == []

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / ".codereport.toml").write_text(
            'version = "1.0"\n'
            "[project]\n"
            'name = "Acme"\n'
            'source_dirs = ["src/main/java"]\n'
            'level = "test"\n'
            "[[reports]]\n"
            'format = "checkstyle"\n'
            'path = "build/checkstyle.xml"\n'
            "[[reports]]\n"
            'format = "generic"\n'
            'flavor = "javac"\n'
            'path = "build/javac.log"\n'
            "[merge]\n"
            "cpd_match_window = 20\n"
        )
        cfg = load_config(tmp_path)
        assert cfg.project.name == "Acme"
        assert cfg.project.source_dirs == ["src/main/java"]
        assert cfg.project.level == "test"
        assert [r.format for r in cfg.reports] == ["checkstyle", "generic"]
        assert cfg.reports[1].flavor == "javac"
        assert cfg.merge.cpd_match_window == 20

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / ".codereport.toml").write_text('[output]\nformat = "json"\ncolour = true\n')
        cfg = load_config(tmp_path)
        assert cfg.output.format == "json"

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[project]\nname = "Custom"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.project.name == "Custom"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / ".codereport.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_unknown_report_format_raises(self, tmp_path: Path):
        (tmp_path / ".codereport.toml").write_text('[[reports]]\nformat = "lint"\npath = "x"\n')
        with pytest.raises(ConfigError, match="unknown format"):
            load_config(tmp_path)

    def test_generic_report_needs_flavor(self, tmp_path: Path):
        (tmp_path / ".codereport.toml").write_text('[[reports]]\nformat = "generic"\npath = "x.log"\n')
        with pytest.raises(ConfigError, match="flavor"):
            load_config(tmp_path)

    def test_unknown_level_raises(self, tmp_path: Path):
        (tmp_path / ".codereport.toml").write_text('[project]\nlevel = "staging"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_format_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CODEREPORT_FORMAT", "sarif")
        cfg = load_config(tmp_path)
        assert cfg.output.format == "sarif"

    def test_project_name_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CODEREPORT_PROJECT_NAME", "FromEnv")
        cfg = load_config(tmp_path)
        assert cfg.project.name == "FromEnv"

    def test_source_dirs_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CODEREPORT_SOURCE_DIRS", os.pathsep.join(["a", "b"]))
        cfg = load_config(tmp_path)
        assert cfg.project.source_dirs == ["a", "b"]

    def test_cpd_window_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CODEREPORT_CPD_WINDOW", "12")
        cfg = load_config(tmp_path)
        assert cfg.merge.cpd_match_window == 12

    def test_log_level_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CODEREPORT_LOG_LEVEL", "DEBUG")
        cfg = load_config(tmp_path)
        assert cfg.logging.level == "debug"

    def test_invalid_env_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("CODEREPORT_FORMAT", "html")
        monkeypatch.setenv("CODEREPORT_CPD_WINDOW", "wide")
        cfg = load_config(tmp_path)
        assert cfg.output.format == "terminal"  # default unchanged
        assert cfg.merge.cpd_match_window == 33
