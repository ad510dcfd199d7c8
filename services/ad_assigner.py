"""
Ad Assignment Module

Resolves concrete ad units for named placements using the slot naming
convention: exact names for header/footer/mobile banners, prefixes for the
repeatable sidebar and inline families. A missing ad is never an error; the
renderer shows a placeholder instead.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Union

from config import settings
from data.models import AdUnit


@dataclass(frozen=True)
class StaticAdAssignment:
    """Ads for the placements filled once per load."""
    header: Optional[AdUnit] = None
    footer: Optional[AdUnit] = None
    mobile: Optional[AdUnit] = None
    sidebar: List[AdUnit] = field(default_factory=list)


class AdAssigner:
    """First-match ad lookup by slot name."""

    def __init__(self, exact_slots: Optional[Dict[str, str]] = None,
                 prefix_slots: Optional[Dict[str, str]] = None):
        self.exact_slots = dict(exact_slots or settings.EXACT_AD_SLOTS)
        self.prefix_slots = dict(prefix_slots or settings.PREFIX_AD_SLOTS)
        # Raw slot names are accepted as aliases of their placement
        self._aliases = {slot: placement for placement, slot in self.exact_slots.items()}

    def resolve(self, ads: List[AdUnit], slot_name: str) -> Union[Optional[AdUnit], List[AdUnit]]:
        """
        Resolve the ad(s) for a placement.

        Args:
            ads: The loaded ad units, in payload order.
            slot_name: A placement ('header', 'footer', 'mobile', 'sidebar', 'inline')
                or an exact slot name ('banner_top', 'banner_footer', 'mobile_banner').

        Returns:
            For 'sidebar', every matching unit in input order. For 'inline', the
            first matching unit or None. For exact slots, the first unit whose
            slot equals the name, or None.

        Raises:
            ValueError: If the slot name is not a known placement.
        """
        placement = self._aliases.get(slot_name, slot_name)

        if placement in self.exact_slots:
            exact = self.exact_slots[placement]
            return next((ad for ad in ads if ad.slot == exact), None)

        if placement == "sidebar":
            prefix = self.prefix_slots[placement]
            return [ad for ad in ads if ad.slot.startswith(prefix)]

        if placement == "inline":
            prefix = self.prefix_slots[placement]
            return next((ad for ad in ads if ad.slot.startswith(prefix)), None)

        raise ValueError(f"Unknown ad slot: {slot_name}")

    def resolve_static_slots(self, ads: List[AdUnit]) -> StaticAdAssignment:
        """Resolve header, footer, mobile and sidebar in one pass."""
        return StaticAdAssignment(
            header=self.resolve(ads, "header"),
            footer=self.resolve(ads, "footer"),
            mobile=self.resolve(ads, "mobile"),
            sidebar=self.resolve(ads, "sidebar")
        )
