"""Built-in finding types — aggregate per origin."""

from codereport.findings.models import Origin
from codereport.rules.builtin.checkstyle import ALL_CHECKSTYLE_TYPES
from codereport.rules.builtin.cpd import ALL_COVERAGE_TYPES, ALL_CPD_TYPES
from codereport.rules.builtin.system import ALL_SYSTEM_TYPES, SYS_ERROR, SYS_PARSE_ERROR
from codereport.rules.models import FindingType

BUILTIN_TYPES: dict[Origin, list[FindingType]] = {
    Origin.CHECKSTYLE: ALL_CHECKSTYLE_TYPES,
    Origin.CPD: ALL_CPD_TYPES,
    Origin.COVERAGE: ALL_COVERAGE_TYPES,
    Origin.SYSTEM: ALL_SYSTEM_TYPES,
}

__all__ = ["BUILTIN_TYPES", "SYS_ERROR", "SYS_PARSE_ERROR"]
