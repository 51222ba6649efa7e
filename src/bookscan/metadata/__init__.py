# ABOUTME: Metadata package for external book lookups and their result types.
# ABOUTME: Exports BookPreview, the MetadataProvider protocol, and the lookup coordinator.

from bookscan.metadata.lookup import BookLookupCoordinator, build_coordinator
from bookscan.metadata.provider import MetadataProvider
from bookscan.metadata.types import BookPreview, BookSource, OcrExtractionResult

__all__ = [
    "BookLookupCoordinator",
    "BookPreview",
    "BookSource",
    "MetadataProvider",
    "OcrExtractionResult",
    "build_coordinator",
]
