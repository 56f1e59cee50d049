"""Source directory reader — registers every file below a source root."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional
from xml.etree.ElementTree import Element

from codereport.readers.base import ReportParseError, ReportReader

logger = logging.getLogger(__name__)

IGNORED_DIR_NAMES = frozenset({".svn", "CVS", ".git"})


class SourceDirectoryReader(ReportReader):
    """Registers source files; contributes no findings, only empty lists."""

    def parse(self, path: Path) -> None:
        directory = Path(path)
        if not directory.is_dir():
            raise ReportParseError(
                f"The given source directory '{directory.absolute()}' is not a valid directory."
            )
        source_dir = os.path.abspath(directory)
        self._add_source_files(source_dir, None, source_dir)

    def read(self, root: Element) -> None:
        raise ReportParseError("Source directories are not XML documents")

    def _add_source_files(self, directory: str, package: Optional[str], source_dir: str) -> None:
        for entry in sorted(os.scandir(directory), key=lambda e: e.name):
            if entry.is_dir():
                if entry.name in IGNORED_DIR_NAMES:
                    logger.debug("Ignoring source dir '%s'", entry.path)
                    continue
                sub_package = entry.name if package is None else f"{package}.{entry.name}"
                self._add_source_files(entry.path, sub_package, source_dir)
            else:
                resource = self.registry.register(entry.path, package, source_dir)
                self.items_for(resource)
