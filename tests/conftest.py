"""Shared test fixtures — a tiny Java source tree and sample tool reports."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from codereport.resources.registry import ResourceRegistry
from codereport.rules.registry import FindingTaxonomy


@pytest.fixture
def src_dir(tmp_path: Path) -> Path:
    """A source root with two classes in ``org.acme`` and one in the default package."""
    root = tmp_path / "src"
    pkg = root / "org" / "acme"
    pkg.mkdir(parents=True)
    (pkg / "Foo.java").write_text(
        "package org.acme;\n\npublic class Foo {\n" + "    int x;\n" * 6 + "}\n"
    )
    (pkg / "Bar.java").write_text(
        "package org.acme;\n\npublic class Bar {\n" + "    int y;\n" * 16 + "}\n"
    )
    (root / "Main.java").write_text("public class Main {\n}\n")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    return root


@pytest.fixture
def registry(src_dir: Path) -> ResourceRegistry:
    """A registry with every file of ``src_dir`` registered."""
    from codereport.readers.sources import SourceDirectoryReader

    reg = ResourceRegistry()
    SourceDirectoryReader(reg, FindingTaxonomy()).parse(src_dir)
    return reg


@pytest.fixture
def taxonomy() -> FindingTaxonomy:
    return FindingTaxonomy()


@pytest.fixture
def checkstyle_xml(src_dir: Path) -> str:
    return textwrap.dedent(f"""\
        <?xml version="1.0" encoding="UTF-8"?>
        <checkstyle version="8.0">
          <file name="{src_dir}/org/acme/Foo.java">
            <error line="3" column="1" severity="warning"
                   message="Missing a Javadoc comment."
                   source="com.puppycrawl.tools.checkstyle.checks.javadoc.JavadocTypeCheck"/>
            <error line="5" severity="error"
                   message="Something nobody has a template for."
                   source="com.puppycrawl.tools.checkstyle.checks.coding.FancyCheck"/>
          </file>
          <file name="{src_dir}/org/acme/Unknown.java">
            <error line="1" severity="error" message="Line is longer than 80 characters."
                   source="com.puppycrawl.tools.checkstyle.checks.sizes.LineLengthCheck"/>
          </file>
        </checkstyle>
    """)


@pytest.fixture
def cpd_xml(src_dir: Path) -> str:
    return textwrap.dedent(f"""\
        <?xml version="1.0" encoding="UTF-8"?>
        <pmd-cpd>
          <duplication lines="12" tokens="80">
            <file line="4" path="{src_dir}/org/acme/Foo.java"/>
            <file line="10" path="{src_dir}/org/acme/Bar.java"/>
            <file line="2" path="{src_dir}/Main.java"/>
            <codefragment><![CDATA[int x;]]></codefragment>
          </duplication>
        </pmd-cpd>
    """)


@pytest.fixture
def findbugs_xml(src_dir: Path) -> str:
    return textwrap.dedent(f"""\
        <?xml version="1.0" encoding="UTF-8"?>
        <BugCollection version="1.3.9">
          <Project>
            <SrcDir>{src_dir}</SrcDir>
          </Project>
          <BugInstance type="NP_NULL_ON_SOME_PATH" priority="1">
            <ShortMessage>Possible null pointer dereference</ShortMessage>
            <LongMessage>Possible null pointer dereference of x in org.acme.Foo.run()</LongMessage>
            <Class classname="org.acme.Foo$Inner">
              <SourceLine classname="org.acme.Foo" start="3" end="9"/>
            </Class>
            <Method classname="org.acme.Foo" name="run" signature="()V">
              <SourceLine classname="org.acme.Foo" start="4" end="8"/>
            </Method>
            <SourceLine classname="org.acme.Foo" start="6" end="6"/>
            <SourceLine classname="org.acme.Foo" start="7" end="7"/>
          </BugInstance>
          <BugInstance type="DM_STRING_CTOR" priority="3">
            <ShortMessage>Inefficient new String() constructor</ShortMessage>
            <Class classname="org.acme.Bar"/>
            <Method classname="org.acme.Bar" name="make" signature="()V">
              <SourceLine classname="org.acme.Bar" start="12" end="14"/>
            </Method>
          </BugInstance>
          <BugInstance type="UUF_UNUSED_FIELD" priority="2">
            <Class classname="org.other.Gone"/>
          </BugInstance>
        </BugCollection>
    """)


@pytest.fixture
def pmd_xml(src_dir: Path) -> str:
    return textwrap.dedent(f"""\
        <?xml version="1.0" encoding="UTF-8"?>
        <pmd version="6.55.0">
          <file name="{src_dir}/org/acme/Bar.java">
            <violation beginline="5" endline="6" begincolumn="3" endcolumn="20"
                       rule="UnusedPrivateField" ruleset="Best Practices" priority="3">
              Avoid unused private fields such as 'y'.
            </violation>
            <violation beginline="8" endline="8" begincolumn="1" endcolumn="4"
                       rule="ShortVariable" ruleset="Code Style" priority="4">
              Avoid variables with short names like y
            </violation>
          </file>
        </pmd>
    """)


@pytest.fixture
def cobertura_xml(src_dir: Path) -> str:
    return textwrap.dedent(f"""\
        <?xml version="1.0" ?>
        <coverage version="7.4" line-rate="0.5">
          <sources>
            <source>{src_dir}</source>
          </sources>
          <packages>
            <package name="org.acme">
              <classes>
                <class name="Foo" filename="org/acme/Foo.java">
                  <lines>
                    <line number="3" hits="2"/>
                    <line number="4" hits="1"/>
                    <line number="5" hits="0"/>
                    <line number="6" hits="7"/>
                  </lines>
                </class>
              </classes>
            </package>
          </packages>
        </coverage>
    """)


@pytest.fixture
def javac_log(src_dir: Path) -> str:
    return textwrap.dedent(f"""\
        [javac] Compiling 3 source files
        {src_dir}/org/acme/Foo.java:4: warning: [deprecation] getYear() in java.util.Date has been deprecated
            int year = date.getYear();
                           ^
        {src_dir}/org/acme/Bar.java:7: error: cannot find symbol
            Baz baz;
            ^
        {src_dir}/org/acme/Gone.java:1: warning: [unchecked] unchecked call
        2 warnings
    """)
