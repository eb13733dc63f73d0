"""
Context Normalizer

Renders a project's heterogeneous context items into one deterministic
grounding document. Items are emitted in the order given (creation order
when read from storage); nothing is deduplicated, ranked or truncated.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..errors import GroundingTooLargeError
from ..models.context_item import ContentKind

logger = logging.getLogger(__name__)


DOCUMENT_HEADING = "Detailed Project Context:"
BLOCK_MARKER = "--- Context Item "
NO_GROUNDING_WARNING = (
    "This project has no context items yet. Generated output can only state "
    "that the available context is insufficient."
)


@dataclass(frozen=True)
class GroundingDocument:
    """A rendered grounding document plus its availability signal."""
    text: str
    item_count: int

    @property
    def available(self) -> bool:
        return self.item_count > 0

    @property
    def warning(self) -> Optional[str]:
        return None if self.available else NO_GROUNDING_WARNING


def _kind(item: Any) -> ContentKind:
    return ContentKind(getattr(item.content_type, "value", item.content_type))


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[str]:
    # A single key point stored as a bare string is one point, not characters
    if isinstance(value, str):
        value = [value]
    elif not isinstance(value, (list, tuple)):
        return []
    return [str(point).strip() for point in value if point and str(point).strip()]


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def scraped_fields(metadata: Any) -> Dict[str, Any]:
    """
    Normalize url metadata.

    Scraped pages are stored either with a nested `scraped_data` record
    (camelCase keys) or with the same fields flattened (snake_case keys).
    Values of the wrong shape are ignored rather than rendered.
    """
    metadata = _as_dict(metadata)
    scraped = _as_dict(metadata.get("scraped_data"))
    business_info = (
        scraped.get("businessInfo")
        or scraped.get("businessContext")
        or metadata.get("business_info")
    )
    return {
        "title": _as_text(scraped.get("title")) or _as_text(metadata.get("title")),
        "summary": _as_text(scraped.get("summary")) or _as_text(metadata.get("summary")),
        "key_points": _as_list(scraped.get("keyPoints") or metadata.get("key_points")),
        "business_info": business_info if isinstance(business_info, (str, dict)) and business_info else None,
        "domain": (
            _as_text(metadata.get("domain"))
            or _as_text(_as_dict(scraped.get("metadata")).get("domain"))
        ),
    }


def render_context_item(item: Any, index: int) -> str:
    """Render one labeled block. `index` is 1-based."""
    kind = _kind(item)
    metadata = _as_dict(item.item_metadata)
    lines = [f"{BLOCK_MARKER}{index} ({kind.value.upper()}) ---"]

    if kind == ContentKind.TEXT:
        lines.append(f"Content: {item.content}")

    elif kind == ContentKind.URL:
        scraped = scraped_fields(metadata)
        lines.append(f"Website: {item.content}")
        lines.append(f"Title: {scraped['title'] or 'N/A'}")
        lines.append(f"Summary: {scraped['summary'] or 'N/A'}")
        if scraped["key_points"]:
            lines.append(f"Key Points: {', '.join(scraped['key_points'])}")
        if scraped["business_info"]:
            lines.append(f"Business Info: {scraped['business_info']}")

    else:
        # The original upload name is what the user recognizes; the stored
        # name is generated at upload time.
        filename = metadata.get("original_name") or metadata.get("name") or "Unknown file"
        lines.append(f"File: {filename}")

    return "\n".join(lines) + "\n"


def build_grounding_document(items: Iterable[Any]) -> str:
    """
    Build the grounding document for a list of context items.

    Returns an empty string when there are no items; callers must treat
    that as "no grounding available".
    """
    blocks = [render_context_item(item, i) for i, item in enumerate(items, start=1)]
    if not blocks:
        return ""
    return DOCUMENT_HEADING + "\n\n" + "\n".join(blocks)


def build_grounding(items: Iterable[Any]) -> GroundingDocument:
    """Build the grounding document and its item count."""
    items = list(items)
    document = GroundingDocument(
        text=build_grounding_document(items),
        item_count=len(items),
    )
    logger.debug(f"Built grounding from {document.item_count} items ({len(document.text)} chars)")
    return document


def count_blocks(text: str) -> int:
    """Number of item blocks in a grounding document."""
    return text.count(BLOCK_MARKER)


def enforce_grounding_limit(document: GroundingDocument, limit: int) -> None:
    """
    Refuse oversized grounding rather than silently dropping facts.

    A limit of 0 (or less) disables the check.
    """
    if limit > 0 and len(document.text) > limit:
        raise GroundingTooLargeError(size=len(document.text), limit=limit)


def item_preview(item: Any, max_len: int = 200) -> List[str]:
    """Short description lines for an item, used by the project summary prompt."""
    kind = _kind(item)
    metadata = _as_dict(item.item_metadata)
    if kind == ContentKind.URL:
        scraped = scraped_fields(metadata)
        lines = [f"Website: {item.content}" + (f" ({scraped['domain']})" if scraped["domain"] else "")]
        lines.append(f"Title: {scraped['title'] or 'N/A'}")
        lines.append(f"Summary: {scraped['summary'] or 'N/A'}")
        if scraped["key_points"]:
            lines.append(f"Key Points: {', '.join(scraped['key_points'])}")
        return lines
    if kind == ContentKind.TEXT:
        content = item.content
        if len(content) > max_len:
            content = content[:max_len] + "..."
        return [f"Content Preview: {content}"]
    return [f"File: {metadata.get('original_name') or metadata.get('name') or 'Unknown file'}"]
