"""
Page Surface Module

The presentation surface the browser draws on. It holds the page's named
insertion points (content grid, controls, ad placements, branding) and applies
render plans to them. `to_html` serializes the current state as a standalone
HTML document.

Markup handed to the surface is inserted verbatim: the renderer escapes
remote data, and host-supplied ad code is trusted.
"""

from dataclasses import replace
from typing import Optional, List, Dict

from config import settings
from data.models import SortKey
from services.renderer import RenderNode, RenderPlan, LoadMoreState, Presentation, escape, default_presentation
from utils.logger import get_logger

logger = get_logger(__name__)

STATIC_AD_PLACEMENTS = ("header", "footer", "mobile")


class PageSurface:
    """In-memory page with named insertion points."""

    def __init__(self, title: Optional[str] = None):
        self.title = title or settings.PAGE_TITLE
        self.grid: List[RenderNode] = []
        self.search_value = ""
        self.categories: List[str] = []
        self.selected_category: Optional[str] = None
        self.sort_value = SortKey.NEWEST
        self.load_more = LoadMoreState(enabled=False, label=settings.LOAD_MORE_LABEL)
        self.ad_slots: Dict[str, str] = {}
        self.sidebar: List[str] = []
        self.inline_override: Optional[str] = None
        self.presentation: Presentation = default_presentation()

    # -------------------------------------------------------------------------
    # Content grid
    # -------------------------------------------------------------------------

    def apply_plan(self, plan: RenderPlan) -> None:
        """Replace or extend the grid with the plan's nodes and update the load-more control."""
        nodes = [self._with_inline_override(node) for node in plan.nodes]
        if plan.mode == "replace":
            self.grid = nodes
        elif plan.mode == "append":
            self.grid.extend(nodes)
        else:
            raise ValueError(f"Unknown render mode: {plan.mode}")
        self.load_more = plan.load_more

    def show_message(self, markup: str, key: str = "message") -> None:
        """Clear the grid to a single message (loading, error)."""
        self.grid = [RenderNode(kind="message", key=key, markup=markup)]
        self.load_more = LoadMoreState(enabled=False, label=self.load_more.label)

    def replace_node(self, key: str, node: RenderNode) -> bool:
        for index, existing in enumerate(self.grid):
            if existing.key == key:
                self.grid[index] = node
                return True
        return False

    def _with_inline_override(self, node: RenderNode) -> RenderNode:
        if self.inline_override is not None and node.kind in ("ad", "placeholder"):
            return replace(node, kind="ad", markup=f'<div class="listed-ad">{self.inline_override}</div>')
        return node

    # -------------------------------------------------------------------------
    # Controls
    # -------------------------------------------------------------------------

    def set_categories(self, categories: List[str]) -> None:
        self.categories = list(categories)

    def set_controls(self, search: str, category: Optional[str], sort_key: SortKey) -> None:
        self.search_value = search
        self.selected_category = category
        self.sort_value = sort_key

    # -------------------------------------------------------------------------
    # Ads and branding
    # -------------------------------------------------------------------------

    def set_ad(self, placement: str, markup: str) -> None:
        if placement not in STATIC_AD_PLACEMENTS:
            raise ValueError(f"Not a static ad placement: {placement}")
        self.ad_slots[placement] = markup

    def set_sidebar(self, markups: List[str]) -> None:
        self.sidebar = list(markups)

    def replace_ad(self, placement: str, markup: str) -> bool:
        """
        Override a placement with host-supplied ad code.

        Args:
            placement: 'header', 'footer', 'mobile', 'sidebar' or 'inline'
            markup: Trusted ad markup

        Returns:
            bool: False if the placement is unknown (nothing changes)
        """
        if placement in STATIC_AD_PLACEMENTS:
            self.ad_slots[placement] = markup
        elif placement == "sidebar":
            self.sidebar = [markup]
        elif placement == "inline":
            self.inline_override = markup
            self.grid = [self._with_inline_override(node) for node in self.grid]
        else:
            logger.warning(f"Ignoring ad override for unknown slot: {placement}")
            return False
        return True

    def apply_presentation(self, presentation: Presentation) -> None:
        self.presentation = presentation

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def grid_markup(self) -> str:
        return "\n".join(node.markup for node in self.grid)

    def to_html(self) -> str:
        """Serialize the page as a standalone HTML document."""
        p = self.presentation
        css_vars = "; ".join(f"{name}: {escape(value)}" for name, value in p.css_variables.items())

        category_options = ['<option value="">All Categories</option>']
        for category in self.categories:
            selected = " selected" if category == self.selected_category else ""
            category_options.append(f'<option value="{escape(category)}"{selected}>{escape(category)}</option>')

        sort_options = []
        for key, label in ((SortKey.NEWEST, "Newest"), (SortKey.POPULAR, "Most Popular")):
            selected = " selected" if key == self.sort_value else ""
            sort_options.append(f'<option value="{key.value}"{selected}>{label}</option>')

        social = "".join(
            f'<a href="{escape(url)}" class="social-link" target="_blank" rel="noopener">{escape(name)}</a>'
            for name, url in p.social_links.items()
        )
        tagline = f'<p class="tagline">{escape(p.tagline)}</p>' if p.tagline else ""
        disabled = "" if self.load_more.enabled else " disabled"

        def slot(placement):
            return self.ad_slots.get(placement, "")

        return "\n".join([
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '<meta charset="utf-8">',
            '<meta name="viewport" content="width=device-width, initial-scale=1">',
            f"<title>{escape(self.title)}</title>",
            f"<style>:root {{ {css_vars} }}</style>",
            "</head>",
            "<body>",
            f'<header class="site-header"><div class="logo">{p.logo_markup}</div>{tagline}</header>',
            f'<div class="ad-header">{slot("header")}</div>',
            '<div class="controls">',
            f'<input type="search" id="searchInput" value="{escape(self.search_value)}" placeholder="Search content...">',
            f'<select id="categoryFilter">{"".join(category_options)}</select>',
            f'<select id="sortFilter">{"".join(sort_options)}</select>',
            "</div>",
            '<div class="layout">',
            f'<main id="contentGrid" class="content-grid">{self.grid_markup()}</main>',
            f'<aside class="ad-sidebar">{"".join(self.sidebar)}</aside>',
            "</div>",
            f'<button id="loadMoreBtn" class="load-more"{disabled}>{escape(self.load_more.label)}</button>',
            f'<div class="ad-mobile">{slot("mobile")}</div>',
            f'<footer class="site-footer"><div class="ad-footer">{slot("footer")}</div>'
            f'<nav class="social-links">{social}</nav></footer>',
            "</body>",
            "</html>",
        ])
