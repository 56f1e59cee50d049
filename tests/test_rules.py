"""Tests for finding types, the taxonomy registry, and log format descriptions."""

import textwrap
from pathlib import Path

import pytest
import yaml

from codereport.config.schema import CodeReportConfig, Severity
from codereport.findings.models import Origin
from codereport.rules.builtin import BUILTIN_TYPES, SYS_PARSE_ERROR
from codereport.rules.formats import (
    FormatDescriptionError,
    load_format_description,
    parse_format_mapping,
    parse_format_xml,
)
from codereport.rules.models import FindingType, GenericFindingType, priority_order
from codereport.rules.registry import (
    FindingTaxonomy,
    TaxonomyError,
    build_taxonomy,
    load_findbugs_messages,
    load_pmd_ruleset,
    pmd_priority_to_severity,
)


class TestFindingTypeModel:
    def test_compiled_pattern_cached(self):
        ft = FindingType(symbol="T", pattern=r"Line is longer than [0-9]+ characters\.")
        p1 = ft.compiled_pattern
        p2 = ft.compiled_pattern
        assert p1 is p2
        assert p1 is not None

    def test_matches_is_full_match(self):
        ft = FindingType(symbol="T", pattern=r"Missing a Javadoc comment\.")
        assert ft.matches("Missing a Javadoc comment.")
        assert not ft.matches("Missing a Javadoc comment. Really.")

    def test_no_pattern_never_matches(self):
        ft = FindingType(symbol="T")
        assert ft.compiled_pattern is None
        assert not ft.matches("anything")

    def test_texts_default_to_symbol(self):
        ft = FindingType(symbol="SOME_TYPE")
        assert ft.short_text == "SOME_TYPE"
        assert ft.description == "SOME_TYPE"

    def test_priority_order(self):
        low = GenericFindingType(symbol="B", pattern="x", priority=0)
        high = GenericFindingType(symbol="A", pattern="x", priority=10)
        tie = GenericFindingType(symbol="C", pattern="x", priority=10)
        assert sorted([low, tie, high], key=priority_order) == [high, tie, low]


class TestBuiltinTypes:
    def test_every_builtin_has_origin_and_severity(self):
        for origin, types in BUILTIN_TYPES.items():
            for ft in types:
                assert ft.origin == origin
                assert ft.severity is not None

    def test_checkstyle_patterns_compile(self):
        for ft in BUILTIN_TYPES[Origin.CHECKSTYLE]:
            assert ft.compiled_pattern is not None, ft.symbol

    def test_unique_symbols(self):
        symbols = [ft.symbol for types in BUILTIN_TYPES.values() for ft in types]
        assert len(symbols) == len(set(symbols))


class TestFindingTaxonomy:
    def test_lazy_initialization(self):
        taxonomy = FindingTaxonomy()
        assert not taxonomy.is_initialized(Origin.CHECKSTYLE)
        assert taxonomy.get("CS_JAVADOC_MISSING") is None
        taxonomy.initialize(Origin.CHECKSTYLE)
        assert taxonomy.is_initialized(Origin.CHECKSTYLE)
        assert taxonomy.get("CS_JAVADOC_MISSING") is not None

    def test_initialize_twice_is_noop(self):
        taxonomy = FindingTaxonomy()
        taxonomy.initialize(Origin.CHECKSTYLE)
        count = len(taxonomy.all_types)
        taxonomy.initialize(Origin.CHECKSTYLE)
        assert len(taxonomy.all_types) == count

    def test_classify_first_full_match(self):
        taxonomy = FindingTaxonomy()
        taxonomy.initialize(Origin.CHECKSTYLE)
        ft = taxonomy.classify(Origin.CHECKSTYLE, "Line is longer than 120 characters.")
        assert ft is not None
        assert ft.symbol == "CS_LINE_TO_LONG"
        assert taxonomy.classify(Origin.CHECKSTYLE, "no template for this") is None

    def test_from_string_creates_placeholder(self):
        taxonomy = FindingTaxonomy()
        ft = taxonomy.from_string("NOT_KNOWN")
        assert ft.symbol == "NOT_KNOWN"
        assert taxonomy.get("NOT_KNOWN") is ft

    def test_system_types(self):
        taxonomy = FindingTaxonomy()
        taxonomy.initialize(Origin.SYSTEM)
        assert taxonomy.get("SYS_PARSE_ERROR") == SYS_PARSE_ERROR

    def test_custom_yaml_types(self, tmp_path: Path):
        types_dir = tmp_path / "types"
        types_dir.mkdir()
        (types_dir / "team.yaml").write_text(yaml.dump([
            {
                "symbol": "CS_TEAM_BANNER",
                "origin": "checkstyle",
                "severity": "design",
                "pattern": r"Banner comment missing\.",
            },
        ]))
        taxonomy = FindingTaxonomy()
        assert taxonomy.load_custom_types(types_dir) == 1
        taxonomy.initialize(Origin.CHECKSTYLE)
        ft = taxonomy.classify(Origin.CHECKSTYLE, "Banner comment missing.")
        assert ft is not None
        assert ft.severity == Severity.DESIGN

    def test_custom_types_missing_dir(self, tmp_path: Path):
        assert FindingTaxonomy().load_custom_types(tmp_path / "nope") == 0

    def test_invalid_custom_type_raises(self, tmp_path: Path):
        (tmp_path / "bad.yaml").write_text(yaml.dump([{"origin": "checkstyle"}]))
        with pytest.raises(TaxonomyError):
            FindingTaxonomy().load_custom_types(tmp_path)

    def test_build_taxonomy_resolves_relative_paths(self, tmp_path: Path):
        types_dir = tmp_path / ".codereport-types"
        types_dir.mkdir()
        (types_dir / "x.yaml").write_text(yaml.dump({"symbol": "X_ONE", "origin": "pmd"}))
        taxonomy = build_taxonomy(CodeReportConfig(), tmp_path)
        taxonomy.initialize(Origin.PMD)
        assert taxonomy.get("X_ONE") is not None


class TestToolCatalogues:
    def test_findbugs_messages(self, tmp_path: Path):
        path = tmp_path / "messages.xml"
        path.write_text(textwrap.dedent("""\
            <MessageCollection>
              <BugPattern type="NP_NULL_ON_SOME_PATH">
                <ShortDescription>Possible null pointer dereference</ShortDescription>
                <Details>
                  There is a branch of statement that, if executed,
                  guarantees that a null value will be dereferenced.
                </Details>
              </BugPattern>
              <BugPattern>
                <ShortDescription>no type</ShortDescription>
              </BugPattern>
            </MessageCollection>
        """))
        types = load_findbugs_messages(path)
        assert [t.symbol for t in types] == ["NP_NULL_ON_SOME_PATH"]
        assert types[0].short_text == "Possible null pointer dereference"
        assert types[0].description.startswith("There is a branch of statement that, if executed, guarantees")

    def test_pmd_ruleset(self, tmp_path: Path):
        path = tmp_path / "rules.xml"
        path.write_text(textwrap.dedent("""\
            <ruleset name="basic" xmlns="http://pmd.sourceforge.net/ruleset/2.0.0">
              <rule name="EmptyCatchBlock" message="Avoid empty catch blocks">
                <description>Empty catch blocks hide errors.</description>
                <priority>1</priority>
              </rule>
              <rule name="ShortVariable" message="Short name">
                <priority>4</priority>
              </rule>
            </ruleset>
        """))
        types = {t.symbol: t for t in load_pmd_ruleset(path)}
        assert types["EmptyCatchBlock"].severity == Severity.ERROR
        assert types["EmptyCatchBlock"].description == "Empty catch blocks hide errors."
        assert types["ShortVariable"].severity == Severity.CODE_STYLE

    def test_malformed_catalogue_raises(self, tmp_path: Path):
        path = tmp_path / "broken.xml"
        path.write_text("<MessageCollection>")
        with pytest.raises(TaxonomyError):
            load_findbugs_messages(path)

    def test_pmd_priority_mapping(self):
        assert pmd_priority_to_severity(1) == Severity.ERROR
        assert pmd_priority_to_severity(5) == Severity.INFO
        assert pmd_priority_to_severity(None) == Severity.WARNING


class TestFormatDescriptions:
    XML = textwrap.dedent("""\
        <finding-type-format>
          <root-type text-pos="3" filename-pos="1" line-start-pos="2">
            <pattern>^(.+):([0-9]+): (.*)$</pattern>
          </root-type>
          <finding-type symbol="LOW" priority="1" text-pos="1">
            <pattern>note: (.*)$</pattern>
          </finding-type>
          <finding-type symbol="HIGH" priority="5" column-start-pos="caret" severity="warning">
            <pattern>warn: (.*)$</pattern>
          </finding-type>
        </finding-type-format>
    """)

    def test_parse_xml(self):
        description = parse_format_xml(self.XML, Origin.GENERIC)
        assert description.root.text_pos == 3
        assert description.root.filename_pos == 1
        assert description.root.severity == Severity.CODE_STYLE
        assert [t.symbol for t in description.finding_types] == ["HIGH", "LOW"]
        high = description.finding_types[0]
        assert high.column_by_caret is True
        assert high.column_start_pos is None
        assert high.severity == Severity.WARNING

    def test_parse_mapping(self):
        description = parse_format_mapping(
            {
                "root_type": {"pattern": "^(.+): (.*)$", "text_pos": 2, "filename_pos": 1, "global": True},
                "finding_types": [{"symbol": "ANY", "pattern": ".*", "severity": "info"}],
            },
            Origin.GENERIC,
        )
        assert description.root.is_global is True
        assert description.finding_types[0].severity == Severity.INFO

    def test_missing_root_type(self):
        with pytest.raises(FormatDescriptionError):
            parse_format_xml("<finding-type-format/>", Origin.GENERIC)

    def test_invalid_pattern(self):
        with pytest.raises(FormatDescriptionError):
            parse_format_mapping(
                {"root_type": {"pattern": "([", "text_pos": 1, "filename_pos": 1}},
                Origin.GENERIC,
            )

    def test_missing_required_position(self):
        with pytest.raises(FormatDescriptionError, match="filename-pos"):
            parse_format_mapping({"root_type": {"pattern": "(.*)", "text_pos": 1}}, Origin.GENERIC)

    def test_packaged_javac_description(self):
        description = load_format_description(Origin.JAVAC)
        symbols = [t.symbol for t in description.finding_types]
        assert symbols[0] == "JAVAC_ERROR"
        assert "JAVAC_DEPRECATION" in symbols
        assert description.source is not None

    def test_search_dir_takes_precedence(self, tmp_path: Path):
        (tmp_path / "javac.yaml").write_text(yaml.dump({
            "root_type": {"pattern": "^(.+): (.*)$", "text_pos": 2, "filename_pos": 1},
            "finding_types": [{"symbol": "MY_JAVAC", "pattern": ".*"}],
        }))
        description = load_format_description(Origin.JAVAC, [tmp_path])
        assert [t.symbol for t in description.finding_types] == ["MY_JAVAC"]

    def test_unknown_origin_has_no_description(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(FormatDescriptionError):
            load_format_description(Origin.GENERIC, [tmp_path])

    def test_taxonomy_format_for(self):
        taxonomy = FindingTaxonomy()
        description = taxonomy.format_for(Origin.JAVADOC)
        assert taxonomy.is_initialized(Origin.JAVADOC)
        assert taxonomy.get(description.finding_types[0].symbol) is not None
