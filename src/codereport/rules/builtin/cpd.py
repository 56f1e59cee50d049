"""Duplicate-code and coverage finding types (one symbol each)."""

from codereport.config.schema import Severity
from codereport.findings.models import Origin
from codereport.rules.models import FindingType

CPD = FindingType(
    symbol="CPD",
    short_text="Copied and pasted code.",
    description="Duplicated code was found. Extract the common part into a shared method or class.",
    severity=Severity.CPD,
    origin=Origin.CPD,
)

COVERAGE = FindingType(
    symbol="coverage",
    short_text="Covered line.",
    description="The line was executed by the test suite.",
    severity=Severity.COVERAGE,
    origin=Origin.COVERAGE,
)

ALL_CPD_TYPES = [CPD]
ALL_COVERAGE_TYPES = [COVERAGE]
