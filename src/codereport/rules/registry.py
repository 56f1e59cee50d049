"""Finding taxonomy — per-origin finding types, loaded lazily and at most once."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set
from xml.etree.ElementTree import ParseError

import yaml
from defusedxml.common import DefusedXmlException
from defusedxml.ElementTree import fromstring

from codereport.config.schema import CodeReportConfig, Severity
from codereport.findings.models import Origin
from codereport.rules.formats import FormatDescription, load_format_description
from codereport.rules.models import FindingType

logger = logging.getLogger(__name__)


class TaxonomyError(Exception):
    """Raised when a taxonomy source file cannot be loaded."""


class FindingTaxonomy:
    """Registry of finding types grouped by origin.

    Create one per pipeline run and hand it to readers; nothing here is
    process-global.
    """

    def __init__(
        self,
        format_dirs: Iterable[Path] = (),
        findbugs_messages: Iterable[Path] = (),
        pmd_rulesets: Iterable[Path] = (),
    ) -> None:
        self._types: Dict[str, FindingType] = {}
        self._enumerated: Dict[Origin, List[FindingType]] = {}
        self._custom: Dict[Origin, List[FindingType]] = {}
        self._formats: Dict[Origin, FormatDescription] = {}
        self._initialized: Set[Origin] = set()
        self._lock = threading.Lock()
        self._format_dirs = [Path(p) for p in format_dirs]
        self._findbugs_messages = [Path(p) for p in findbugs_messages]
        self._pmd_rulesets = [Path(p) for p in pmd_rulesets]

    # ---- registration ----

    def register(self, finding_type: FindingType) -> None:
        self._types[finding_type.symbol] = finding_type
        if finding_type.origin is not None and finding_type.pattern is not None:
            self._enumerated.setdefault(finding_type.origin, []).append(finding_type)

    def register_many(self, finding_types: Iterable[FindingType]) -> None:
        for ft in finding_types:
            self.register(ft)

    # ---- queries ----

    @property
    def all_types(self) -> List[FindingType]:
        return list(self._types.values())

    def get(self, symbol: str) -> Optional[FindingType]:
        return self._types.get(symbol)

    def from_string(self, symbol: str) -> FindingType:
        """Return the type for *symbol*; unknown symbols get a placeholder."""
        result = self._types.get(symbol)
        if result is None:
            result = FindingType(symbol=symbol)
            self._types[symbol] = result
        return result

    def enumerated(self, origin: Origin) -> List[FindingType]:
        """Pattern-carrying types of *origin* in classification order."""
        return list(self._enumerated.get(origin, []))

    def classify(self, origin: Origin, message: str) -> Optional[FindingType]:
        """Return the first type of *origin* whose pattern fully matches *message*."""
        for finding_type in self._enumerated.get(origin, []):
            if finding_type.matches(message):
                return finding_type
        return None

    def format_for(self, origin: Origin) -> FormatDescription:
        """Format description of a log-based origin (initializes it)."""
        self.initialize(origin)
        return self._formats[origin]

    def is_initialized(self, origin: Origin) -> bool:
        return origin in self._initialized

    # ---- lazy per-origin loading ----

    def initialize(self, origin: Origin) -> None:
        """Load the finding types of *origin*; later calls are no-ops."""
        with self._lock:
            if origin in self._initialized:
                return
            self._load_origin(origin)
            self._initialized.add(origin)

    def _load_origin(self, origin: Origin) -> None:
        from codereport.rules.builtin import BUILTIN_TYPES

        logger.debug("Initializing finding types for origin '%s'", origin)
        self.register_many(BUILTIN_TYPES.get(origin, []))

        if origin == Origin.FINDBUGS:
            for path in self._findbugs_messages:
                self.register_many(load_findbugs_messages(path))
        elif origin == Origin.PMD:
            for path in self._pmd_rulesets:
                self.register_many(load_pmd_ruleset(path))
        elif origin.is_generic:
            description = load_format_description(origin, self._format_dirs)
            self._formats[origin] = description
            for ft in description.finding_types:
                self._types[ft.symbol] = ft

        self.register_many(self._custom.get(origin, []))

    # ---- custom type loading ----

    def load_custom_types(self, directory: Path) -> int:
        """Load YAML finding-type files from *directory*. Returns count loaded."""
        count = 0
        if not directory.is_dir():
            return 0
        for path in sorted(directory.iterdir()):
            if path.suffix in (".yaml", ".yml"):
                count += self._load_yaml_types(path)
        return count

    def _load_yaml_types(self, path: Path) -> int:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise TaxonomyError(f"Failed to load finding types from {path}: {exc}") from exc
        if data is None:
            return 0
        if not isinstance(data, list):
            data = [data]
        count = 0
        for entry in data:
            try:
                origin = Origin.from_string(entry.get("origin", "generic"))
                severity = entry.get("severity")
                finding_type = FindingType(
                    symbol=entry["symbol"],
                    short_text=entry.get("short_text", ""),
                    description=entry.get("description", ""),
                    severity=Severity.from_string(severity) if severity else None,
                    pattern=entry.get("pattern"),
                    origin=origin,
                )
            except (KeyError, ValueError, AttributeError) as exc:
                raise TaxonomyError(f"Invalid finding type in {path}: {exc}") from exc
            self._custom.setdefault(origin, []).append(finding_type)
            if origin in self._initialized:
                self.register(finding_type)
            count += 1
        return count


# ---- tool message catalogues ----


def _parse_catalogue(path: Path):
    try:
        return fromstring(path.read_bytes())
    except (OSError, ParseError, DefusedXmlException) as exc:
        raise TaxonomyError(f"Failed to load {path}: {exc}") from exc


def _text(elem, tag: str) -> str:
    child = elem.find(tag)
    return " ".join((child.text or "").split()) if child is not None else ""


def load_findbugs_messages(path: Path) -> List[FindingType]:
    """Read ``BugPattern`` entries from a FindBugs ``messages.xml``."""
    root = _parse_catalogue(path)
    types = []
    for pattern in root.iter("BugPattern"):
        symbol = pattern.get("type")
        if not symbol:
            continue
        types.append(
            FindingType(
                symbol=symbol,
                short_text=_text(pattern, "ShortDescription"),
                description=_text(pattern, "Details") or _text(pattern, "LongDescription"),
                origin=Origin.FINDBUGS,
            )
        )
    logger.debug("Loaded %d FindBugs bug patterns from %s", len(types), path)
    return types


_PMD_PRIORITY_SEVERITY = {
    1: Severity.ERROR,
    2: Severity.WARNING,
    3: Severity.DESIGN,
    4: Severity.CODE_STYLE,
    5: Severity.INFO,
}


def pmd_priority_to_severity(priority: Optional[int]) -> Severity:
    """Map a PMD rule priority (1 = high .. 5 = low) to a severity."""
    return _PMD_PRIORITY_SEVERITY.get(priority, Severity.WARNING)


def load_pmd_ruleset(path: Path) -> List[FindingType]:
    """Read ``rule`` entries from a PMD ruleset file (namespaces ignored)."""
    root = _parse_catalogue(path)
    types = []
    for elem in root.iter():
        if _local_name(elem.tag) != "rule" or not elem.get("name"):
            continue
        description = ""
        priority = None
        for child in elem:
            name = _local_name(child.tag)
            if name == "description":
                description = " ".join((child.text or "").split())
            elif name == "priority":
                try:
                    priority = int((child.text or "").strip())
                except ValueError:
                    priority = None
        types.append(
            FindingType(
                symbol=elem.get("name"),
                short_text=elem.get("message", ""),
                description=description,
                severity=pmd_priority_to_severity(priority),
                origin=Origin.PMD,
            )
        )
    logger.debug("Loaded %d PMD rules from %s", len(types), path)
    return types


def _local_name(tag) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def build_taxonomy(config: CodeReportConfig, project_root: Path) -> FindingTaxonomy:
    """Create a taxonomy with the configured catalogues and custom types."""

    def _resolve(p: str) -> Path:
        path = Path(p)
        return path if path.is_absolute() else project_root / path

    taxonomy = FindingTaxonomy(
        format_dirs=[_resolve(p) for p in config.taxonomy.format_dirs],
        findbugs_messages=[_resolve(p) for p in config.taxonomy.findbugs_messages],
        pmd_rulesets=[_resolve(p) for p in config.taxonomy.pmd_rulesets],
    )
    taxonomy.load_custom_types(_resolve(config.taxonomy.custom_types_dir))
    return taxonomy
