"""Resource registry — one canonical identity per source file.

Tools name the same file differently (absolute path, relative path, dotted
class name). The registry indexes each resource by canonical path and by
``(package, classname)`` so every reader converges on one ``ResourceInfo``.
"""

from __future__ import annotations

import logging
import os
import threading
from typing import Dict, List, Optional, Tuple

from codereport.resources.models import JAVA_SUFFIX, ResourceInfo

logger = logging.getLogger(__name__)


class ResourceConflictError(Exception):
    """Raised when a path is re-registered with a different package or source dir."""


def canonical_name(name: str) -> str:
    """Platform-normalized absolute path."""
    return os.path.realpath(os.path.abspath(name or ""))


def normalize_file_name(name: str) -> str:
    """Collapse inner-type references (``Outer$Inner``) onto the enclosing file."""
    if "$" in name:
        collapsed = name[: name.index("$")] + JAVA_SUFFIX
        logger.debug("Changing resource filename from %s to %s", name, collapsed)
        name = collapsed
    return os.path.abspath(name)


class ResourceRegistry:
    """Canonicalizing store of ``ResourceInfo`` objects.

    Create one per pipeline run. Both indices are updated under a single
    lock so readers may register concurrently.
    """

    def __init__(self) -> None:
        self._by_name: Dict[str, ResourceInfo] = {}
        self._by_class: Dict[Tuple[str, str], ResourceInfo] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def resources(self) -> List[ResourceInfo]:
        return list(self._by_name.values())

    def _canonical(self, name: str) -> str:
        if name in self._by_name:
            return name
        return canonical_name(name)

    def register(self, name: str, package: Optional[str], source_dir: str) -> ResourceInfo:
        """Return the canonical resource for *name*, creating it on first sight."""
        with self._lock:
            key = self._canonical(name)
            candidate = ResourceInfo(
                name=key,
                package=package or "",
                source_dir=self._canonical(source_dir),
            )
            existing = self._by_name.get(key)
            if existing is not None:
                if existing != candidate:
                    raise ResourceConflictError(
                        f"Resource {key} is already registered as "
                        f"(package={existing.package!r}, source_dir={existing.source_dir!r}), "
                        f"not (package={candidate.package!r}, source_dir={candidate.source_dir!r})"
                    )
                return existing
            self._by_name[key] = candidate
            if candidate.classname:
                self._by_class[(candidate.package, candidate.classname)] = candidate
            return candidate

    def lookup(self, name: str) -> Optional[ResourceInfo]:
        """Exact match first, then the canonicalized path."""
        result = self._by_name.get(name)
        if result is None:
            result = self._by_name.get(canonical_name(name))
        if result is None:
            logger.debug("Resource not found for '%s'", name)
        return result

    def lookup_class(self, package: Optional[str], classname: str) -> Optional[ResourceInfo]:
        result = self._by_class.get((package or "", classname or ""))
        if result is None:
            logger.debug("Resource not found for class '%s.%s'", package, classname)
        return result
