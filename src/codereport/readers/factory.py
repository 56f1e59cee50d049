"""Reader factory keyed by report format name."""

from __future__ import annotations

from typing import Dict, Optional, Type

from codereport.findings.models import Origin
from codereport.readers.base import ReportReader
from codereport.readers.checkstyle import CheckstyleReader
from codereport.readers.coverage import CoberturaReader, JCoverageReader
from codereport.readers.cpd import CpdReader
from codereport.readers.findbugs import FindBugsReader
from codereport.readers.generic import GenericReader
from codereport.readers.pmd import PmdReader
from codereport.readers.sources import SourceDirectoryReader
from codereport.resources.registry import ResourceRegistry
from codereport.rules.registry import FindingTaxonomy

_READERS: Dict[str, Type[ReportReader]] = {
    "checkstyle": CheckstyleReader,
    "cpd": CpdReader,
    "findbugs": FindBugsReader,
    "pmd": PmdReader,
    "jcoverage": JCoverageReader,
    "cobertura": CoberturaReader,
    "sources": SourceDirectoryReader,
}


def create_reader(
    format: str,
    registry: ResourceRegistry,
    taxonomy: FindingTaxonomy,
    flavor: Optional[str] = None,
) -> ReportReader:
    """Return a fresh reader for *format*.

    ``generic`` needs a *flavor* naming the log origin (``javadoc``,
    ``javac`` or ``generic``). The log origins may also be passed
    directly as the format.
    """
    key = format.strip().lower()
    if key == "generic":
        origin = Origin.from_string(flavor) if flavor else Origin.GENERIC
        if not origin.is_generic:
            raise ValueError(f"'{flavor}' is not a log-based origin")
        return GenericReader(registry, taxonomy, origin)
    if key in ("javadoc", "javac"):
        return GenericReader(registry, taxonomy, Origin.from_string(key))
    reader_cls = _READERS.get(key)
    if reader_cls is None:
        raise ValueError(f"Unknown report format: {format!r}")
    return reader_cls(registry, taxonomy)
