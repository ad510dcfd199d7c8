"""
Content Store Module

This module owns the loaded collections (items, ads, branding) and provides
the filter/sort query over the items. Loading goes through an injected
DataSource; a newer load always supersedes an older one still in flight.
"""

import threading
from datetime import datetime, timezone
from typing import Optional, List

from config import settings
from data.models import ContentItem, AdUnit, BrandingProfile, QueryState, SortKey, LoadResult
from data.payload import parse_document
from data.protocols import DataSource
from utils.exceptions import LoadError
from utils.logger import get_logger

logger = get_logger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class ContentStore:
    """In-memory store for one loaded payload."""

    def __init__(self, strict_schema: Optional[bool] = None, schema_version: Optional[int] = None):
        """
        Initialize an empty content store.

        Args:
            strict_schema: Reject unversioned payloads, defaults to settings.STRICT_SCHEMA
            schema_version: Accepted schema_version, defaults to settings.SUPPORTED_SCHEMA_VERSION
        """
        self.strict_schema = settings.STRICT_SCHEMA if strict_schema is None else strict_schema
        self.schema_version = settings.SUPPORTED_SCHEMA_VERSION if schema_version is None else schema_version

        self._items: List[ContentItem] = []
        self._ads: List[AdUnit] = []
        self._branding = BrandingProfile()
        self._loaded = False

        self._generation = 0
        self._lock = threading.Lock()

    @property
    def items(self) -> List[ContentItem]:
        return list(self._items)

    @property
    def ads(self) -> List[AdUnit]:
        return list(self._ads)

    @property
    def branding(self) -> BrandingProfile:
        return self._branding

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self, source: DataSource) -> Optional[LoadResult]:
        """
        Fetch and normalize a payload, replacing the current collections wholesale.

        Args:
            source: Where to fetch the JSON document from.

        Returns:
            Optional[LoadResult]: The new collections, or None if a newer load
            started while this one was in flight (the result is discarded).

        Raises:
            LoadError: If fetching fails; ParseError / SchemaError for bad documents.
                The store is emptied before the error propagates.
                Any other failure is wrapped in a LoadError.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation

        logger.info(f"Loading content from {source.describe()}")

        try:
            document = source.fetch_json()
            result = parse_document(document, strict=self.strict_schema,
                                    supported_version=self.schema_version)
        except Exception as e:
            with self._lock:
                if generation != self._generation:
                    logger.info(f"Discarding failed load superseded by a newer request: {e}")
                    return None
                self._reset()
            logger.error(f"Error loading content: {e}")
            if isinstance(e, LoadError):
                raise
            raise LoadError(f"Unexpected error loading from {source.describe()}: {e}") from e

        with self._lock:
            if generation != self._generation:
                logger.info("Discarding load result superseded by a newer request")
                return None
            self._items = list(result.items)
            self._ads = list(result.ads)
            self._branding = result.branding
            self._loaded = True

        logger.info(f"Loaded {len(result.items)} items, {len(result.ads)} ads"
                    f"{', with branding' if not result.branding.is_empty() else ''}")
        return result

    def _reset(self) -> None:
        self._items = []
        self._ads = []
        self._branding = BrandingProfile()
        self._loaded = False

    def query(self, state: QueryState) -> List[ContentItem]:
        """
        Filter and sort the full item collection.

        Pagination is left to the caller.

        Args:
            state: The current query (search term, category, sort key).

        Returns:
            List[ContentItem]: All matching items in display order.
        """
        term = (state.search_term or "").strip().lower()
        category = state.category or None

        matches = [
            item for item in self._items
            if (not term or term in item.title.lower() or term in item.description.lower())
            and (category is None or item.category == category)
        ]

        # sorted() is stable, so ties keep collection order
        if state.sort_key == SortKey.POPULAR:
            return sorted(matches, key=lambda item: item.popularity, reverse=True)
        return sorted(matches, key=lambda item: item.published_at or _OLDEST, reverse=True)

    def categories(self) -> List[str]:
        """Distinct, lexicographically sorted categories of the unfiltered collection."""
        return sorted({item.category for item in self._items if item.category})
