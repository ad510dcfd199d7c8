"""
Payload Normalization

Turns one decoded JSON document into the three collections the browser works
with (items, ads, branding).

Accepted shapes:
- Versioned envelope: {"schema_version": 1, "items": [...], "ads": [...], "branding": {...}}
  Validated strictly; any mismatch raises SchemaError.
- Legacy shapes (disabled in strict mode), tried in order:
  1. A list of wrapper objects; the first wrapper with a non-empty items list
     plus ads and branding fields wins.
  2. A single wrapper object.
  3. Any other list, taken as the items collection itself.
"""

from typing import Any, Dict, List, Optional

from data.models import ContentItem, AdUnit, BrandingProfile, LoadResult
from utils.exceptions import ParseError, SchemaError
from utils.helpers import first_present, to_text, to_non_negative_int, parse_timestamp
from utils.logger import get_logger

logger = get_logger(__name__)

ITEM_KEYS = ("items", "posts")


def parse_document(document: Any, strict: bool = False, supported_version: int = 1) -> LoadResult:
    """
    Normalize a decoded JSON document.

    Args:
        document: The decoded JSON value
        strict: Reject documents that do not carry a schema_version
        supported_version: The only schema_version accepted

    Returns:
        LoadResult: Normalized items, ads and branding

    Raises:
        ParseError: If the top-level value has an unexpected shape
        SchemaError: If a versioned document does not match the schema
    """
    if isinstance(document, dict) and "schema_version" in document:
        return _parse_envelope(document, supported_version)

    if strict:
        raise SchemaError("Document has no schema_version and strict schema mode is enabled")

    if isinstance(document, list):
        wrapper = next((entry for entry in document if _is_wrapper(entry)), None)
        if wrapper is not None:
            logger.debug("Using first wrapper object with data from list payload")
            return _parse_wrapper(wrapper)
        return LoadResult(items=parse_items(document))

    if isinstance(document, dict):
        return _parse_wrapper(document)

    raise ParseError(f"Unexpected top-level document of type {type(document).__name__}")


def _parse_envelope(document: Dict[str, Any], supported_version: int) -> LoadResult:
    version = document.get("schema_version")
    if version != supported_version:
        raise SchemaError(f"Unsupported schema_version {version!r}, expected {supported_version}")

    items = document.get("items")
    ads = document.get("ads", [])
    branding = document.get("branding", {})

    if not isinstance(items, list):
        raise SchemaError("Field 'items' must be a list")
    if not isinstance(ads, list):
        raise SchemaError("Field 'ads' must be a list")
    if not isinstance(branding, dict):
        raise SchemaError("Field 'branding' must be an object")

    return LoadResult(
        items=parse_items(items),
        ads=parse_ads(ads),
        branding=parse_branding(branding)
    )


def _items_of(wrapper: Dict[str, Any]) -> Optional[Any]:
    return first_present(wrapper, *ITEM_KEYS)


def _is_wrapper(entry: Any) -> bool:
    if not isinstance(entry, dict):
        return False
    items = _items_of(entry)
    return (isinstance(items, list) and len(items) > 0
            and entry.get("ads") is not None
            and entry.get("branding") is not None)


def _parse_wrapper(wrapper: Dict[str, Any]) -> LoadResult:
    items = _items_of(wrapper)
    ads = wrapper.get("ads")
    branding = wrapper.get("branding")
    return LoadResult(
        items=parse_items(items if isinstance(items, list) else []),
        ads=parse_ads(ads if isinstance(ads, list) else []),
        branding=parse_branding(branding if isinstance(branding, dict) else {})
    )


def parse_items(raw_items: List[Any]) -> List[ContentItem]:
    """
    Build content items from raw payload entries.

    Non-object entries are skipped and duplicate ids after the first are dropped.
    Entries without an id get a generated "auto-<position>" id that never
    collides with an id present in the payload.
    """
    items = []
    seen_ids = set()
    payload_ids = {
        to_text(raw["id"]) for raw in raw_items
        if isinstance(raw, dict) and raw.get("id") is not None
    }

    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            logger.warning(f"Skipping non-object item at position {index}")
            continue

        raw_id = raw.get("id")
        item_id = to_text(raw_id) if raw_id is not None else _fallback_id(index, payload_ids)
        if item_id in seen_ids:
            logger.warning(f"Dropping duplicate item id {item_id!r}")
            continue
        seen_ids.add(item_id)

        items.append(ContentItem(
            id=item_id,
            title=to_text(raw.get("title")),
            description=to_text(raw.get("description")),
            category=to_text(raw.get("category")),
            published_at=parse_timestamp(first_present(raw, "date", "published_at")),
            popularity=to_non_negative_int(first_present(raw, "views", "popularity", default=0)),
            thumbnail_url=to_text(first_present(raw, "thumbnail", "thumbnail_url")),
            target_url=to_text(first_present(raw, "link", "url"))
        ))

    return items


def _fallback_id(index: int, taken: set) -> str:
    candidate = f"auto-{index}"
    suffix = 1
    while candidate in taken:
        candidate = f"auto-{index}-{suffix}"
        suffix += 1
    return candidate


def parse_ads(raw_ads: List[Any]) -> List[AdUnit]:
    """Build ad units; entries without a slot name are skipped."""
    ads = []
    for index, raw in enumerate(raw_ads):
        if not isinstance(raw, dict) or not raw.get("slot"):
            logger.warning(f"Skipping ad without a slot at position {index}")
            continue
        ads.append(AdUnit(
            slot=to_text(raw.get("slot")),
            image_url=to_text(raw.get("image_url")),
            click_url=to_text(raw.get("click_url")),
            alt_text=to_text(raw.get("alt_text"))
        ))
    return ads


def parse_branding(raw: Dict[str, Any]) -> BrandingProfile:
    """Build a branding profile; empty strings count as absent."""
    def optional(key):
        value = raw.get(key)
        return str(value) if value not in (None, "") else None

    social = raw.get("social_links")
    social_links = {}
    if isinstance(social, dict):
        social_links = {str(k): str(v) for k, v in social.items() if v}

    return BrandingProfile(
        company_name=optional("company_name"),
        logo_url=optional("logo_url"),
        primary_color=optional("primary_color"),
        secondary_color=optional("secondary_color"),
        accent_color=optional("accent_color"),
        social_links=social_links,
        tagline=optional("tagline")
    )
