"""
Renderer Module

Pure "what to display" decisions for the content grid: the pagination window,
inline-ad cadence, escaping, date display and the markup for cards, ads and
branding. Nothing in here touches the page; the PageSurface applies the
resulting RenderPlan.
"""

import html
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Callable

from config import settings
from data.models import ContentItem, AdUnit, BrandingProfile, QueryState

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
                       "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

SECONDS_PER_DAY = 24 * 60 * 60

# Hex, named and functional (rgb/hsl) colors; nothing that can break out of a style block
SAFE_COLOR_PATTERN = re.compile(r"^[#\w\s(),.%-]+$")


# =============================================================================
# View models
# =============================================================================

@dataclass(frozen=True)
class GridEntry:
    """One position in the interleaved grid: an item, an ad, or an ad placeholder."""
    kind: str                        # 'item', 'ad' or 'placeholder'
    ordinal: int                     # Ordinal of the item (or of the item the ad follows)
    item: Optional[ContentItem] = None
    ad: Optional[AdUnit] = None


@dataclass(frozen=True)
class RenderNode:
    """A node to place in the content grid."""
    kind: str                        # 'card', 'ad', 'placeholder' or 'message'
    key: str
    markup: str
    item_id: Optional[str] = None


@dataclass(frozen=True)
class LoadMoreState:
    enabled: bool
    label: str


@dataclass(frozen=True)
class RenderPlan:
    """How the content grid changes: replace everything, or append to it."""
    mode: str                        # 'replace' or 'append'
    nodes: List[RenderNode]
    load_more: LoadMoreState
    target: str = "content-grid"


@dataclass(frozen=True)
class Presentation:
    """The page-wide branding currently in effect."""
    company_name: str
    logo_markup: str
    css_variables: Dict[str, str] = field(default_factory=dict)
    tagline: Optional[str] = None
    social_links: Dict[str, str] = field(default_factory=dict)


# =============================================================================
# Pure helpers
# =============================================================================

def escape(text) -> str:
    """HTML-escape a value for use as text or attribute content. None becomes ''."""
    if text is None:
        return ""
    return html.escape(str(text), quote=True)


def paginate(filtered: List[ContentItem], page: int, page_size: int) -> List[ContentItem]:
    """Return the visible window [0, (page+1)*page_size)."""
    return filtered[:(page + 1) * page_size]


def page_delta(filtered: List[ContentItem], page: int, page_size: int):
    """
    Return the tail revealed by moving to `page`, and the ordinal of its first item.

    Returns:
        tuple: (items in [page*page_size, (page+1)*page_size), 1-based start ordinal)
    """
    start = page * page_size
    return filtered[start:start + page_size], start + 1


def interleave(visible: List[ContentItem], start_ordinal: int, ad_frequency: int = 5,
               inline_ad: Optional[AdUnit] = None) -> List[GridEntry]:
    """
    Insert an inline ad after every item whose ordinal is a multiple of ad_frequency.

    Ordinals continue from start_ordinal and are global across pages, so the
    cadence does not restart when more items are appended.

    Args:
        visible: Items to lay out, in display order.
        start_ordinal: 1-based ordinal of the first item in `visible`.
        ad_frequency: Cadence of inline ads.
        inline_ad: The creative to use, or None for placeholders.

    Returns:
        List[GridEntry]: Items with ad (or placeholder) entries interleaved.
    """
    entries = []
    for offset, item in enumerate(visible):
        ordinal = start_ordinal + offset
        entries.append(GridEntry(kind="item", ordinal=ordinal, item=item))
        if ad_frequency > 0 and ordinal % ad_frequency == 0:
            if inline_ad is not None:
                entries.append(GridEntry(kind="ad", ordinal=ordinal, ad=inline_ad))
            else:
                entries.append(GridEntry(kind="placeholder", ordinal=ordinal))
    return entries


def has_more(filtered_count: int, page: int, page_size: int) -> bool:
    return (page + 1) * page_size < filtered_count


def format_date(timestamp: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    Format a timestamp relative to now.

    One day or less reads "Today", two days "Yesterday", up to a week
    "N days ago" (N = days - 1), anything older "Mon D, YYYY".
    """
    if timestamp is None:
        return ""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    diff_days = math.ceil(abs((now - timestamp).total_seconds()) / SECONDS_PER_DAY)

    if diff_days <= 1:
        return "Today"
    if diff_days == 2:
        return "Yesterday"
    if diff_days <= 7:
        return f"{diff_days - 1} days ago"
    return f"{MONTH_ABBREVIATIONS[timestamp.month - 1]} {timestamp.day}, {timestamp.year}"


def format_views(count: int) -> str:
    return f"{count:,} views"


def default_presentation() -> Presentation:
    """The presentation in effect before any branding is applied."""
    defaults = settings.DEFAULT_BRANDING
    return Presentation(
        company_name=defaults.get("company_name", ""),
        logo_markup=escape(defaults.get("company_name", "")),
        css_variables={
            f"--{name.replace('_', '-')}": value
            for name, value in defaults.items() if name.endswith("_color")
        }
    )


# =============================================================================
# Renderer
# =============================================================================

class Renderer:
    """Builds render plans and markup for the content page."""

    def __init__(self, page_size: Optional[int] = None, ad_frequency: Optional[int] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the renderer.

        Args:
            page_size: Items per page, defaults to settings.ITEMS_PER_PAGE
            ad_frequency: Inline ad cadence, defaults to settings.AD_FREQUENCY
            clock: Returns "now" for relative dates, defaults to the current UTC time
        """
        self.page_size = page_size or settings.ITEMS_PER_PAGE
        self.ad_frequency = ad_frequency or settings.AD_FREQUENCY
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def render_page(self, filtered: List[ContentItem], state: QueryState,
                    inline_ad: Optional[AdUnit] = None) -> RenderPlan:
        """
        Decide what the grid shows for the given query state.

        Page 0 replaces the grid with the first window; later pages append only
        the newly revealed tail.

        Args:
            filtered: The full filtered, sorted item list.
            state: The current query state.
            inline_ad: The inline creative, or None for placeholders.

        Returns:
            RenderPlan: Nodes to place and the load-more control state.
        """
        more = has_more(len(filtered), state.page, self.page_size)
        load_more = LoadMoreState(
            enabled=more,
            label=settings.LOAD_MORE_LABEL if more else settings.NO_MORE_LABEL
        )

        if state.page == 0:
            visible = paginate(filtered, 0, self.page_size)
            if not visible:
                node = RenderNode(kind="message", key="no-results", markup=self.no_results_markup())
                return RenderPlan(mode="replace", nodes=[node], load_more=load_more)
            entries = interleave(visible, 1, self.ad_frequency, inline_ad)
            mode = "replace"
        else:
            visible, start_ordinal = page_delta(filtered, state.page, self.page_size)
            entries = interleave(visible, start_ordinal, self.ad_frequency, inline_ad)
            mode = "append"

        return RenderPlan(mode=mode, nodes=[self.render_entry(e) for e in entries], load_more=load_more)

    def render_entry(self, entry: GridEntry) -> RenderNode:
        if entry.kind == "item":
            return self.render_card(entry.item)
        if entry.kind == "ad":
            return RenderNode(kind="ad", key=f"inline-ad-{entry.ordinal}",
                              markup=f'<div class="listed-ad">{self.ad_markup(entry.ad)}</div>')
        return RenderNode(kind="placeholder", key=f"inline-ad-{entry.ordinal}",
                          markup=f'<div class="listed-ad">{self.placeholder_markup("inline")}</div>')

    def render_card(self, item: ContentItem, image_loaded: bool = False) -> RenderNode:
        """Build the card node for an item; the thumbnail stays a placeholder until loaded."""
        title = escape(item.title)
        link = escape(item.target_url)
        thumbnail = escape(item.thumbnail_url)

        if image_loaded:
            image = (f'<img src="{thumbnail}" alt="{title}" class="lazy-image loaded" '
                     f'loading="lazy">')
        else:
            image = (f'<img src="{settings.LAZY_IMAGE_PLACEHOLDER}" data-src="{thumbnail}" '
                     f'alt="{title}" class="lazy-image" loading="lazy">')

        markup = (
            f'<article class="content-card fade-in" data-id="{escape(item.id)}">'
            f'<div class="card-thumbnail">'
            f'<a href="{link}" class="card-thumbnail-link" target="_blank" rel="noopener">{image}</a>'
            f'</div>'
            f'<div class="card-content">'
            f'<span class="card-category">{escape(item.category)}</span>'
            f'<a href="{link}" class="card-title" target="_blank" rel="noopener">{title}</a>'
            f'<p class="card-description">{escape(item.description)}</p>'
            f'<div class="card-meta">'
            f'<span>{escape(format_date(item.published_at, self.clock()))}</span>'
            f'<span>{format_views(item.popularity)}</span>'
            f'</div>'
            f'</div>'
            f'</article>'
        )
        return RenderNode(kind="card", key=f"item-{item.id}", markup=markup, item_id=item.id)

    def ad_markup(self, ad: AdUnit) -> str:
        alt = ad.alt_text or settings.DEFAULT_AD_ALT_TEXT
        return (f'<a href="{escape(ad.click_url)}" target="_blank" rel="noopener" class="ad-link">'
                f'<img src="{escape(ad.image_url)}" alt="{escape(alt)}" class="ad-image" loading="lazy">'
                f'</a>')

    def placeholder_markup(self, placement: str) -> str:
        label = settings.AD_PLACEHOLDERS.get(placement, "Ad")
        return (f'<div class="ad-placeholder"><span>{escape(label)}</span>'
                f'<small>{escape(settings.AD_PLACEHOLDER_HINT)}</small></div>')

    def slot_markup(self, placement: str, ad: Optional[AdUnit]) -> str:
        """Markup for a static placement; falls back to the placeholder when no ad resolved."""
        if ad is None:
            return self.placeholder_markup(placement)
        return self.ad_markup(ad)

    def sidebar_markup(self, ads: List[AdUnit]) -> List[str]:
        if not ads:
            return [self.placeholder_markup("sidebar")]
        return [f'<div class="sidebar-ad-item">{self.ad_markup(ad)}</div>' for ad in ads]

    def loading_markup(self) -> str:
        return f'<div class="loading">{escape(settings.LOADING_MESSAGE)}</div>'

    def error_markup(self, message: str) -> str:
        return f'<div class="loading">{escape(message)}</div>'

    def no_results_markup(self) -> str:
        return (f'<div class="loading"><p>{escape(settings.NO_RESULTS_MESSAGE)}</p>'
                f'<p>{escape(settings.NO_RESULTS_HINT)}</p></div>')

    def render_branding(self, profile: BrandingProfile, current: Presentation) -> Presentation:
        """
        Overlay a branding profile on the current presentation.

        Only fields present in the profile change; everything else is kept.
        """
        if profile.is_empty():
            return current

        company_name = profile.company_name or current.company_name

        if profile.logo_url:
            logo_markup = (f'<img src="{escape(profile.logo_url)}" '
                           f'alt="{escape(profile.company_name or "Logo")}" class="logo-image">')
        elif profile.company_name:
            logo_markup = escape(profile.company_name)
        else:
            logo_markup = current.logo_markup

        css_variables = dict(current.css_variables)
        for name, value in (("--primary-color", profile.primary_color),
                            ("--secondary-color", profile.secondary_color),
                            ("--accent-color", profile.accent_color)):
            if value and SAFE_COLOR_PATTERN.match(value):
                css_variables[name] = value

        social_links = dict(current.social_links)
        social_links.update(profile.social_links)

        return Presentation(
            company_name=company_name,
            logo_markup=logo_markup,
            css_variables=css_variables,
            tagline=profile.tagline or current.tagline,
            social_links=social_links
        )
