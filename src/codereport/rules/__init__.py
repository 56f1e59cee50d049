"""Finding taxonomy — descriptors, registry, built-in types and log formats."""

from codereport.rules.formats import FormatDescription, FormatDescriptionError
from codereport.rules.models import FindingType, GenericFindingType
from codereport.rules.registry import FindingTaxonomy, TaxonomyError, build_taxonomy

__all__ = [
    "FindingTaxonomy",
    "FindingType",
    "FormatDescription",
    "FormatDescriptionError",
    "GenericFindingType",
    "TaxonomyError",
    "build_taxonomy",
]
