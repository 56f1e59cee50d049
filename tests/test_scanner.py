"""Tests for the log classifier and the normalizer pipeline."""

from pathlib import Path

import pytest

from codereport.config.schema import CodeReportConfig, ReportSource, Severity
from codereport.findings.models import Origin, Report
from codereport.resources.registry import ResourceConflictError
from codereport.rules.models import GenericFindingType
from codereport.scanner import PatternClassifier
from codereport.scanner.engine import ReportNormalizer, add_system_level_issue


def _type(symbol, pattern, **kwargs) -> GenericFindingType:
    return GenericFindingType(symbol=symbol, pattern=pattern, **kwargs)


class TestPatternClassifier:
    def test_caret_column(self):
        content = "warn: bad thing\n  code();\n     ^\nnext"
        classifier = PatternClassifier([_type("W", r"warn: (.*)$", text_pos=1, column_by_caret=True)])
        result = classifier.classify(content, "warn: bad thing", 0)
        assert result.item is not None
        assert result.item.message == "bad thing"
        assert result.item.column == 6
        assert content[result.pos:] == "next"

    def test_missing_caret_keeps_position(self):
        content = "warn: bad thing\nno caret here\n"
        classifier = PatternClassifier([_type("W", r"warn: (.*)$", text_pos=1, column_by_caret=True)])
        result = classifier.classify(content, "warn: bad thing", 0)
        assert result.item.column is None
        assert result.pos == len("warn: bad thing") + 1

    def test_no_match(self):
        classifier = PatternClassifier([_type("W", r"warn: (.*)$")])
        result = classifier.classify("other text", "other text", 3)
        assert result.item is None
        assert result.pos == 3

    def test_priority_order(self):
        classifier = PatternClassifier([
            _type("ANY", r".*", priority=0),
            _type("SPECIFIC", r"deprecated (\w+)", priority=10, text_pos=1),
        ])
        result = classifier.classify("deprecated foo", "deprecated foo", 0)
        assert result.item.finding_type == "SPECIFIC"
        assert result.item.message == "foo"

    def test_positions_extracted(self):
        classifier = PatternClassifier([
            _type(
                "POS", r"(\d+):(\d+)-(\d+):(\d+) (.*)$",
                line_start_pos=1, column_start_pos=2, line_end_pos=3, column_end_pos=4,
                text_pos=5, severity=Severity.WARNING,
            ),
        ])
        item = classifier.classify("3:4-5:6 msg", "3:4-5:6 msg", 0).item
        assert (item.line, item.column, item.end_line, item.end_column) == (3, 4, 5, 6)
        assert item.severity == Severity.WARNING
        assert item.message == "msg"

    def test_whole_match_when_no_text_pos(self):
        classifier = PatternClassifier([_type("ALL", r"something")])
        assert classifier.classify("something", "something", 0).item.message == "something"


class TestReportNormalizer:
    def _write(self, tmp_path: Path, name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    def test_full_pipeline(self, tmp_path, src_dir, checkstyle_xml, cpd_xml):
        normalizer = ReportNormalizer()
        normalizer.add_report("checkstyle", self._write(tmp_path, "cs.xml", checkstyle_xml))
        normalizer.add_report("cpd", self._write(tmp_path, "cpd.xml", cpd_xml))
        normalizer.add_source(src_dir)
        result = normalizer.run()

        report = result.report
        names = [f.name for f in report.files]
        assert names == sorted(names)
        assert len(report.files) == 3

        foo = next(f for f in report.files if f.classname == "Foo")
        assert foo.package == "org.acme"
        assert foo.loc == 10
        assert foo.level == "prod"
        assert sorted(i.origin.value for i in foo.items) == ["checkstyle", "checkstyle", "cpd"]
        assert result.total_items == report.total_items == 5
        assert result.failed_reports == []

    def test_files_without_findings_kept(self, src_dir):
        normalizer = ReportNormalizer()
        normalizer.add_source(src_dir)
        report = normalizer.run().report
        assert sorted(f.classname for f in report.files) == ["Bar", "Foo", "Main"]
        assert report.total_items == 0

    def test_empty_report_skipped(self, tmp_path, src_dir):
        normalizer = ReportNormalizer()
        normalizer.add_source(src_dir)
        normalizer.add_report("findbugs", self._write(tmp_path, "fb.xml", ""))
        result = normalizer.run()
        assert result.failed_reports == []
        assert result.report.total_items == 0

    def test_parse_error_becomes_finding(self, tmp_path, src_dir, pmd_xml):
        broken = self._write(tmp_path, "broken.xml", "<pmd><file>")
        normalizer = ReportNormalizer()
        normalizer.add_source(src_dir)
        normalizer.add_report("pmd", broken)
        normalizer.add_report("pmd", self._write(tmp_path, "pmd.xml", pmd_xml))
        result = normalizer.run()

        assert result.failed_reports == [str(broken)]
        errors = [
            (f, i) for f, i in result.report.iter_items() if i.finding_type == "SYS_PARSE_ERROR"
        ]
        assert len(errors) == 1
        report_file, item = errors[0]
        assert item.origin == Origin.SYSTEM
        assert item.severity == Severity.ERROR
        assert item.message.startswith("Error while processing 'pmd'")
        assert report_file.name.endswith("broken.xml")
        # the good report was still read
        assert any(i.origin == Origin.PMD for _, i in result.report.iter_items())

    def test_missing_source_dir(self, tmp_path):
        normalizer = ReportNormalizer()
        normalizer.add_source(tmp_path / "nope")
        result = normalizer.run()
        item = result.report.files[0].items[0]
        assert item.finding_type == "SYS_PARSE_ERROR"
        assert "'source directory'" in item.message

    def test_unknown_format_is_reported(self, tmp_path):
        normalizer = ReportNormalizer()
        normalizer.add_report("lint", self._write(tmp_path, "lint.xml", "<x/>"))
        result = normalizer.run()
        assert result.report.total_items == 1

    def test_resource_conflict_is_fatal(self, src_dir):
        normalizer = ReportNormalizer()
        normalizer.add_source(src_dir)
        normalizer.add_source(src_dir / "org")
        with pytest.raises(ResourceConflictError):
            normalizer.run()

    def test_from_config(self, tmp_path, src_dir, pmd_xml):
        self._write(tmp_path, "pmd.xml", pmd_xml)
        cfg = CodeReportConfig()
        cfg.project.name = "Acme"
        cfg.project.level = "test"
        cfg.project.source_dirs = ["src"]
        cfg.reports = [ReportSource(format="pmd", path="pmd.xml")]
        report = ReportNormalizer.from_config(cfg, tmp_path).run().report
        assert report.name == "Acme"
        assert all(f.level == "test" for f in report.files)
        assert sum(1 for _ in report.iter_items()) == 2

    def test_generic_log(self, tmp_path, src_dir, javac_log):
        normalizer = ReportNormalizer()
        normalizer.add_source(src_dir)
        normalizer.add_report("generic", self._write(tmp_path, "javac.log", javac_log), "javac")
        report = normalizer.run().report
        assert sorted(i.finding_type for _, i in report.iter_items()) == ["JAVAC_DEPRECATION", "JAVAC_ERROR"]

    def test_same_log_twice_not_duplicated(self, tmp_path, src_dir, javac_log):
        log = self._write(tmp_path, "javac.log", javac_log)
        normalizer = ReportNormalizer()
        normalizer.add_source(src_dir)
        normalizer.add_report("generic", log, "javac")
        normalizer.add_report("generic", log, "javac")
        assert normalizer.run().total_items == 2

    def test_broken_report_inside_source_root(self, src_dir):
        broken = src_dir / "checkstyle-result.xml"
        broken.write_text("<checkstyle><file>", encoding="utf-8")
        normalizer = ReportNormalizer()
        normalizer.add_source(src_dir)
        normalizer.add_report("checkstyle", broken)
        result = normalizer.run()
        assert result.failed_reports == [str(broken)]
        errors = [(f, i) for f, i in result.report.iter_items() if i.finding_type == "SYS_PARSE_ERROR"]
        assert len(errors) == 1
        assert errors[0][0].name.endswith("checkstyle-result.xml")


class TestSystemLevelIssue:
    def test_global_entry_created(self):
        report = Report()
        item = add_system_level_issue(report, "out of disk")
        assert item.is_global is True
        assert item.finding_type == "SYS_ERROR"
        assert report.files[0].name == ""
        assert report.files[0].items == [item]

    def test_reuses_global_entry(self):
        report = Report()
        add_system_level_issue(report, "first")
        add_system_level_issue(report, "second")
        assert len(report.files) == 1
        assert len(report.files[0].items) == 2
