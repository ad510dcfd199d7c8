"""
Configuration Settings for the Content Browser

This module centralizes all configuration settings for the Content Browser,
including environment variables, data source settings, and presentation constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# Data Source Settings
# =============================================================================

CONTENT_API_URL = os.getenv("CONTENT_API_URL", "https://68b43ecb45c90167876fdf56.mockapi.io/api/v1/posts")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))   # Seconds to wait for the data source

# Payload schema
SUPPORTED_SCHEMA_VERSION = 1
STRICT_SCHEMA = _env_bool("STRICT_SCHEMA", False)   # Reject documents without schema_version

USER_AGENT = 'content-browser/1.0 (+https://example.com/content-browser)'
REQUEST_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'application/json',
    'Accept-Language': 'en-US,en;q=0.5',
    'Connection': 'keep-alive'
}

# =============================================================================
# Pagination, Search and Ad Cadence
# =============================================================================

ITEMS_PER_PAGE = int(os.getenv("ITEMS_PER_PAGE", "6"))
SEARCH_DEBOUNCE_MS = int(os.getenv("SEARCH_DEBOUNCE_MS", "300"))
AD_FREQUENCY = int(os.getenv("AD_FREQUENCY", "5"))   # Inline ad after every Nth item
DEFAULT_SORT = os.getenv("DEFAULT_SORT", "newest")

# =============================================================================
# Ad Slot Settings
# =============================================================================

# Placement name -> exact slot name in the payload
EXACT_AD_SLOTS = {
    "header": "banner_top",
    "footer": "banner_footer",
    "mobile": "mobile_banner",
}

# Placement name -> slot prefix in the payload
PREFIX_AD_SLOTS = {
    "sidebar": "sidebar_",
    "inline": "inline_",
}

AD_PLACEMENTS = ["header", "sidebar", "inline", "footer", "mobile"]

AD_PLACEHOLDERS = {
    "header": "Header Ad Banner (728×90)",
    "sidebar": "Sidebar Ad (300×250)",
    "inline": "Inline Ad Banner (728×120)",
    "footer": "Footer Ad Banner (728×90)",
    "mobile": "Mobile Ad Banner (320×50)",
}
AD_PLACEHOLDER_HINT = "Replace with your ad code"
DEFAULT_AD_ALT_TEXT = "Advertisement"

# =============================================================================
# Presentation Settings
# =============================================================================

PAGE_TITLE = os.getenv("PAGE_TITLE", "Content Hub")

DEFAULT_BRANDING = {
    "company_name": "Content Hub",
    "primary_color": "#3b82f6",
    "secondary_color": "#1e293b",
    "accent_color": "#f59e0b",
}

LAZY_IMAGE_PLACEHOLDER = (
    "data:image/svg+xml,%3Csvg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 400 200'%3E"
    "%3Crect width='400' height='200' fill='%23334155'/%3E%3C/svg%3E"
)

LOADING_MESSAGE = "Loading content..."
LOAD_ERROR_MESSAGE = "Failed to load content. Please try again."
NO_RESULTS_MESSAGE = "No content found matching your criteria."
NO_RESULTS_HINT = "Try adjusting your search or filters."
LOAD_MORE_LABEL = "Load More"
NO_MORE_LABEL = "No More Content"
