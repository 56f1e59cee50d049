"""Finding types raised by codereport itself."""

from codereport.config.schema import Severity
from codereport.findings.models import Origin
from codereport.rules.models import FindingType

SYS_PARSE_ERROR = FindingType(
    symbol="SYS_PARSE_ERROR",
    short_text="Failed to parse input file.",
    description="A tool report could not be read or parsed; its findings are missing from this report.",
    severity=Severity.ERROR,
    origin=Origin.SYSTEM,
)

SYS_ERROR = FindingType(
    symbol="SYS_ERROR",
    short_text="Error during processing.",
    description="An unexpected error occurred while building the report.",
    severity=Severity.ERROR,
    origin=Origin.SYSTEM,
)

ALL_SYSTEM_TYPES = [SYS_PARSE_ERROR, SYS_ERROR]
