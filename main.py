"""
Content Browser Application

This is the main entry point for the Content Browser.
It loads a content payload, renders a paginated, filterable grid of items
interleaved with ads, applies runtime branding, and writes the page as HTML.
"""

import sys
import argparse
import logging
import threading
from enum import Enum
from pathlib import Path
from typing import Optional, List, Dict

from config import settings
from config.validators import validate_settings, get_config_summary
from data.models import ContentItem, QueryState, SortKey
from data.protocols import DataSource
from data.sources import HttpDataSource, source_from_location
from services.ad_assigner import AdAssigner
from services.content_store import ContentStore
from services.lazy_loader import LazyImageLoader
from services.page_surface import PageSurface
from services.protocols import ContentStoreProtocol, AdAssignerProtocol, SurfaceProtocol
from services.renderer import Renderer, default_presentation, has_more
from utils.debounce import Debouncer
from utils.exceptions import ContentBrowserError, LoadError
from utils.logger import get_logger, setup_file_logging

# Set up logging
logger = get_logger(__name__)

AD_PLACEMENTS = tuple(settings.AD_PLACEMENTS)


class BrowserState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ContentBrowser:
    """
    Main application class for the Content Browser.

    This class owns the render loop: it wires the store, ad assigner,
    renderer and surface together, runs the Idle -> Loading -> Ready/Failed
    state machine, and exposes the control surface for embedding hosts.
    """

    def __init__(
        self,
        source: DataSource,
        store: Optional[ContentStoreProtocol] = None,
        assigner: Optional[AdAssignerProtocol] = None,
        renderer: Optional[Renderer] = None,
        surface: Optional[SurfaceProtocol] = None,
        lazy_loader: Optional[LazyImageLoader] = None,
        debounce_ms: Optional[int] = None,
        timer_factory=None,
        validate: bool = True
    ):
        """
        Initialize the Content Browser.

        Args:
            source: Where the content payload is fetched from
            store: Content store, a fresh ContentStore if None
            assigner: Ad assigner, a fresh AdAssigner if None
            renderer: Renderer, a fresh Renderer if None
            surface: Presentation surface, a fresh PageSurface if None
            lazy_loader: Lazy image loader, a fresh LazyImageLoader if None
            debounce_ms: Search debounce window, defaults to settings.SEARCH_DEBOUNCE_MS
            timer_factory: Timer used by the search debouncer (threading.Timer by default)
            validate: Whether to validate settings on startup
        """
        if validate:
            validate_settings(require_api_url=isinstance(source, HttpDataSource))

        self.source = source
        self.store = store or ContentStore()
        self.assigner = assigner or AdAssigner()
        self.renderer = renderer or Renderer()
        self.surface = surface or PageSurface()
        self.lazy_loader = lazy_loader or LazyImageLoader()

        self.state = BrowserState.IDLE
        self.query_state = QueryState(sort_key=SortKey.parse(settings.DEFAULT_SORT))
        self.filtered: List[ContentItem] = []
        self.last_error: Optional[Exception] = None

        self._presentation = default_presentation()
        self._ad_overrides: Dict[str, str] = {}
        self._visible_items: Dict[str, ContentItem] = {}
        self._lock = threading.RLock()

        wait_ms = settings.SEARCH_DEBOUNCE_MS if debounce_ms is None else debounce_ms
        self._search_debouncer = Debouncer(self.search_now, wait_ms / 1000, timer_factory)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def start(self) -> bool:
        """Load content and draw the first page."""
        return self.refresh_content()

    def refresh_content(self) -> bool:
        """
        (Re)load the payload and redraw everything.

        Returns:
            bool: True if the page is ready, False if loading failed or was superseded
        """
        with self._lock:
            self.state = BrowserState.LOADING
            self._search_debouncer.cancel()
            self.surface.show_message(self.renderer.loading_markup(), key="loading")

        try:
            result = self.store.load(self.source)
        except LoadError as e:
            logger.error(f"Error loading content: {e}", exc_info=True)
            self._fail(e)
            return False
        except Exception as e:
            logger.error(f"Unexpected error loading content: {e}", exc_info=True)
            self._fail(e)
            return False

        if result is None:
            logger.info("Load superseded by a newer refresh")
            return False

        with self._lock:
            self.last_error = None
            self.surface.set_categories(self.store.categories())
            self.query_state = QueryState(
                search_term=self.query_state.search_term,
                category=self.query_state.category,
                sort_key=self.query_state.sort_key
            )
            self._render()
            self._fill_static_ads(self.store.ads)
            self._apply_branding()
            self.state = BrowserState.READY
            logger.info(f"Content ready: {len(self.filtered)} of {len(result.items)} items match")
        return True

    def _fail(self, error: Exception) -> None:
        """Enter FAILED: error message in the grid, empty static slots, default branding."""
        with self._lock:
            self.last_error = error
            self.filtered = []
            self._visible_items = {}
            self.lazy_loader.clear()
            self.surface.set_categories([])
            self.surface.show_message(self.renderer.error_markup(settings.LOAD_ERROR_MESSAGE), key="error")
            self._fill_static_ads([])
            self._presentation = default_presentation()
            self.surface.apply_presentation(self._presentation)
            self.state = BrowserState.FAILED

    def _fill_static_ads(self, ads) -> None:
        assignment = self.assigner.resolve_static_slots(ads)
        self.surface.set_ad("header", self.renderer.slot_markup("header", assignment.header))
        self.surface.set_ad("footer", self.renderer.slot_markup("footer", assignment.footer))
        self.surface.set_ad("mobile", self.renderer.slot_markup("mobile", assignment.mobile))
        self.surface.set_sidebar(self.renderer.sidebar_markup(assignment.sidebar))

        # Host overrides outlive reloads
        for placement, markup in self._ad_overrides.items():
            self.surface.replace_ad(placement, markup)

    def _apply_branding(self) -> None:
        self._presentation = self.renderer.render_branding(self.store.branding, self._presentation)
        self.surface.apply_presentation(self._presentation)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _render(self) -> None:
        self.filtered = self.store.query(self.query_state)
        inline_ad = self.assigner.resolve(self.store.ads, "inline")
        plan = self.renderer.render_page(self.filtered, self.query_state, inline_ad)

        if plan.mode == "replace":
            self.lazy_loader.clear()
            self._visible_items = {}

        self.surface.apply_plan(plan)
        self.surface.set_controls(self.query_state.search_term, self.query_state.category,
                                  self.query_state.sort_key)

        items_by_id = {item.id: item for item in self.filtered}
        for node in plan.nodes:
            if node.kind == "card" and node.item_id in items_by_id:
                self._visible_items[node.key] = items_by_id[node.item_id]
                self.lazy_loader.observe(node.key, self._reveal_image)

        logger.debug(f"Rendered page {self.query_state.page} ({plan.mode}, {len(plan.nodes)} nodes)")

    def _reveal_image(self, key: str) -> None:
        with self._lock:
            item = self._visible_items.get(key)
            if item is None:
                return
            self.surface.replace_node(key, self.renderer.render_card(item, image_loaded=True))

    def _accepts_events(self, event: str) -> bool:
        if self.state != BrowserState.READY:
            logger.debug(f"Ignoring {event} while {self.state.value}")
            return False
        return True

    # -------------------------------------------------------------------------
    # User events
    # -------------------------------------------------------------------------

    def search(self, term: str) -> None:
        """Debounced search: only the last term within the quiet period is applied."""
        self._search_debouncer(term)

    def search_now(self, term: str) -> None:
        with self._lock:
            if not self._accepts_events("search"):
                return
            self.query_state = self.query_state.with_search(term)
            self._render()

    def filter_category(self, category: Optional[str]) -> None:
        with self._lock:
            if not self._accepts_events("filter"):
                return
            self.query_state = self.query_state.with_category(category)
            self._render()

    def sort(self, sort_key) -> None:
        with self._lock:
            if not self._accepts_events("sort"):
                return
            key = sort_key if isinstance(sort_key, SortKey) else SortKey.parse(sort_key)
            self.query_state = self.query_state.with_sort(key)
            self._render()

    def load_more(self) -> bool:
        """
        Append the next page.

        Returns:
            bool: False if there was nothing more to show
        """
        with self._lock:
            if not self._accepts_events("load more"):
                return False
            if not has_more(len(self.filtered), self.query_state.page, self.renderer.page_size):
                logger.debug("No more content to load")
                return False
            self.query_state = self.query_state.next_page()
            self._render()
            return True

    def image_visible(self, key: str) -> bool:
        return self.lazy_loader.notify_visible(key)

    # -------------------------------------------------------------------------
    # Host control surface
    # -------------------------------------------------------------------------

    def replace_ad(self, slot: str, markup: str) -> bool:
        """Override a placement ('header', 'sidebar', 'inline', 'footer', 'mobile') with host ad code."""
        with self._lock:
            if slot not in AD_PLACEMENTS:
                logger.warning(f"Ignoring ad override for unknown slot: {slot}")
                return False
            self._ad_overrides[slot] = markup
            return self.surface.replace_ad(slot, markup)

    def replace_all_ads(self, ad_codes: Dict[str, str]) -> List[str]:
        """
        Override several placements at once; empty markup and unknown slots are skipped.

        Returns:
            List[str]: The placements that were replaced
        """
        replaced = []
        for slot, markup in ad_codes.items():
            if markup and self.replace_ad(slot, markup):
                replaced.append(slot)
        return replaced


def create_content_browser(location: Optional[str] = None, **kwargs) -> ContentBrowser:
    """
    Build a ContentBrowser for a URL or JSON file path.

    Args:
        location: URL or path of the payload, defaults to settings.CONTENT_API_URL
        **kwargs: Passed through to ContentBrowser

    Returns:
        ContentBrowser: A browser that has not been started yet
    """
    return ContentBrowser(source_from_location(location), **kwargs)


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Content Browser')
    parser.add_argument('--source', type=str, default=None,
                        help='URL or JSON file to load (defaults to CONTENT_API_URL)')
    parser.add_argument('--search', type=str, default='', help='Search term for titles and descriptions')
    parser.add_argument('--category', type=str, default=None, help='Only show this category')
    parser.add_argument('--sort', type=str, choices=[k.value for k in SortKey], default=None,
                        help='Sort order')
    parser.add_argument('--pages', type=int, default=1, help='Number of pages to show')
    parser.add_argument('--output', type=str, default=None, help='Write the rendered page to this file')
    parser.add_argument('--list-categories', action='store_true', help='Print the available categories')
    parser.add_argument('--log-file', type=str, default=None, help='Log file path')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO', help='Logging level')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main entry point for the application."""
    args = parse_arguments(argv)

    # Set up logging
    setup_file_logging(args.log_file, getattr(logging, args.log_level))

    logger.info("Starting Content Browser")
    logger.debug(f"Configuration: {get_config_summary()}")

    try:
        browser = create_content_browser(args.source)

        if not browser.start():
            logger.warning("Content could not be loaded")
            exit_code = 1
        else:
            if args.sort:
                browser.sort(args.sort)
            if args.category:
                browser.filter_category(args.category)
            if args.search:
                browser.search_now(args.search)
            for _ in range(max(0, args.pages - 1)):
                if not browser.load_more():
                    break

            if args.list_categories:
                for category in browser.store.categories():
                    print(category)

            page_html = browser.surface.to_html()
            if args.output:
                Path(args.output).write_text(page_html, encoding="utf-8")
                logger.info(f"Wrote page to {args.output}")
            elif not args.list_categories:
                print(page_html)

            logger.info(f"Showing {len(browser.surface.grid)} nodes for {len(browser.filtered)} matching items")
            exit_code = 0

    except ContentBrowserError as e:
        logger.error(f"Content browser error: {e}", exc_info=True)
        exit_code = 2
    except Exception as e:
        logger.error(f"Unhandled exception in Content Browser: {e}", exc_info=True)
        exit_code = 2

    logger.info(f"Content Browser finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
