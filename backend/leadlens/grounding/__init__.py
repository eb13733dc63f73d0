# Context Normalizer
from .normalizer import (
    GroundingDocument,
    build_grounding,
    build_grounding_document,
    count_blocks,
    enforce_grounding_limit,
    item_preview,
    scraped_fields,
    NO_GROUNDING_WARNING,
)

__all__ = [
    "GroundingDocument",
    "build_grounding",
    "build_grounding_document",
    "count_blocks",
    "enforce_grounding_limit",
    "item_preview",
    "scraped_fields",
    "NO_GROUNDING_WARNING",
]
