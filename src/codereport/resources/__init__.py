"""Source-file identities and their registry."""

from codereport.resources.models import ResourceInfo, class_name_for
from codereport.resources.registry import (
    ResourceConflictError,
    ResourceRegistry,
    normalize_file_name,
)

__all__ = [
    "ResourceConflictError",
    "ResourceInfo",
    "ResourceRegistry",
    "class_name_for",
    "normalize_file_name",
]
