"""Report readers — one per tool format, all producing items per resource."""

from codereport.readers.base import (
    ItemMap,
    ReportParseError,
    ReportReader,
    patch_unescaped_attributes,
)
from codereport.readers.factory import create_reader

__all__ = [
    "ItemMap",
    "ReportParseError",
    "ReportReader",
    "create_reader",
    "patch_unescaped_attributes",
]
