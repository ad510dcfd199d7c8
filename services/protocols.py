"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for the services the content
browser is assembled from. These protocols enable loose coupling, dependency
injection, and easier testing.

Protocols defined:
- ContentStoreProtocol: Interface for loading and querying content
- AdAssignerProtocol: Interface for resolving ads to placements
- SurfaceProtocol: Interface for the presentation surface
"""

from typing import Protocol, Optional, List, Union

from data.models import ContentItem, AdUnit, BrandingProfile, QueryState, LoadResult
from data.protocols import DataSource
from services.ad_assigner import StaticAdAssignment
from services.renderer import RenderNode, RenderPlan, Presentation


class ContentStoreProtocol(Protocol):
    """Protocol defining the interface for content stores.

    Implementations should provide methods for:
    - Loading a payload from a data source, replacing all collections
    - Querying items by search term, category and sort key
    - Listing the distinct categories of the loaded items
    """

    @property
    def ads(self) -> List[AdUnit]:
        ...

    @property
    def branding(self) -> BrandingProfile:
        ...

    def load(self, source: DataSource) -> Optional[LoadResult]:
        """Fetch and normalize a payload.

        Args:
            source: The data source to fetch from.

        Returns:
            The new collections, or None if a newer load superseded this one.

        Raises:
            LoadError: If the payload could not be fetched or parsed.
        """
        ...

    def query(self, state: QueryState) -> List[ContentItem]:
        """Return all items matching the query, in display order."""
        ...

    def categories(self) -> List[str]:
        """Return the sorted distinct categories of the loaded items."""
        ...


class AdAssignerProtocol(Protocol):
    """Protocol defining the interface for ad slot resolution."""

    def resolve(self, ads: List[AdUnit], slot_name: str) -> Union[Optional[AdUnit], List[AdUnit]]:
        """Resolve the ad(s) for a placement.

        Args:
            ads: Loaded ad units.
            slot_name: Placement name.

        Returns:
            A list for 'sidebar', otherwise a single unit or None.
        """
        ...

    def resolve_static_slots(self, ads: List[AdUnit]) -> StaticAdAssignment:
        """Resolve header, footer, mobile and sidebar in one pass."""
        ...


class SurfaceProtocol(Protocol):
    """Protocol defining the interface for presentation surfaces.

    The in-memory PageSurface implements it; an embedding host can supply
    another implementation that drives a live page.
    """

    def apply_plan(self, plan: RenderPlan) -> None:
        ...

    def show_message(self, markup: str, key: str = "message") -> None:
        ...

    def replace_node(self, key: str, node: RenderNode) -> bool:
        ...

    def set_categories(self, categories: List[str]) -> None:
        ...

    def set_controls(self, search: str, category: Optional[str], sort_key) -> None:
        ...

    def set_ad(self, placement: str, markup: str) -> None:
        ...

    def set_sidebar(self, markups: List[str]) -> None:
        ...

    def replace_ad(self, placement: str, markup: str) -> bool:
        ...

    def apply_presentation(self, presentation: Presentation) -> None:
        ...
