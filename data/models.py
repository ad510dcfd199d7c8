"""
Data Models for the Content Browser

This module contains data classes and models used throughout the application:
content items, ad units, branding profiles and the transient query state.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict


@dataclass(frozen=True)
class ContentItem:
    """One displayable unit in the content grid.

    All string fields come from the remote payload and are untrusted.
    """
    id: str
    title: str
    description: str
    category: str
    published_at: Optional[datetime]   # None when the payload date is missing or unparseable
    popularity: int                    # View count, never negative
    thumbnail_url: str
    target_url: str


@dataclass(frozen=True)
class AdUnit:
    """An advertising creative bound to a slot (e.g. 'banner_top', 'sidebar_1')."""
    slot: str
    image_url: str
    click_url: str
    alt_text: str = ""


@dataclass(frozen=True)
class BrandingProfile:
    """Presentation override. Every field is optional; None means 'leave as is'."""
    company_name: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    accent_color: Optional[str] = None
    social_links: Dict[str, str] = field(default_factory=dict)
    tagline: Optional[str] = None

    def is_empty(self) -> bool:
        return not any([
            self.company_name, self.logo_url, self.primary_color,
            self.secondary_color, self.accent_color, self.social_links, self.tagline
        ])


class SortKey(str, Enum):
    NEWEST = "newest"
    POPULAR = "popular"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortKey":
        """Map a control value to a sort key; unknown values fall back to newest."""
        try:
            return cls(value)
        except ValueError:
            return cls.NEWEST


@dataclass(frozen=True)
class QueryState:
    """Transient query derived from user input.

    Changing the search term, category or sort key always resets the page;
    only next_page() advances it.
    """
    search_term: str = ""
    category: Optional[str] = None
    sort_key: SortKey = SortKey.NEWEST
    page: int = 0

    def __post_init__(self):
        if self.page < 0:
            raise ValueError(f"page must be non-negative, got {self.page}")

    def with_search(self, search_term: str) -> "QueryState":
        return replace(self, search_term=search_term, page=0)

    def with_category(self, category: Optional[str]) -> "QueryState":
        return replace(self, category=category or None, page=0)

    def with_sort(self, sort_key: SortKey) -> "QueryState":
        return replace(self, sort_key=sort_key, page=0)

    def next_page(self) -> "QueryState":
        return replace(self, page=self.page + 1)


@dataclass(frozen=True)
class LoadResult:
    """The normalized collections produced by one successful load."""
    items: List[ContentItem] = field(default_factory=list)
    ads: List[AdUnit] = field(default_factory=list)
    branding: BrandingProfile = field(default_factory=BrandingProfile)
