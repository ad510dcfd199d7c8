"""
Configuration Validation for the Content Browser

This module contains configuration validation logic and a loggable
configuration summary.
"""

import logging

from utils.exceptions import ConfigurationError
from utils.helpers import is_valid_url

logger = logging.getLogger(__name__)

VALID_SORT_KEYS = ("newest", "popular")


def validate_settings(require_api_url: bool = True):
    """
    Validate that all required settings are properly configured.

    Args:
        require_api_url: Check CONTENT_API_URL. Browsers reading a local file
            never contact the endpoint, so they skip this check.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings

    errors = []

    if require_api_url:
        if not settings.CONTENT_API_URL:
            errors.append("Missing required environment variable: CONTENT_API_URL")
        elif not is_valid_url(settings.CONTENT_API_URL):
            errors.append(f"CONTENT_API_URL is not a valid URL: {settings.CONTENT_API_URL}")

    # Validate numeric settings are within reasonable bounds
    numeric_validations = [
        ("ITEMS_PER_PAGE", settings.ITEMS_PER_PAGE, 1, 100),
        ("AD_FREQUENCY", settings.AD_FREQUENCY, 1, 100),
        ("SEARCH_DEBOUNCE_MS", settings.SEARCH_DEBOUNCE_MS, 0, 5000),
    ]

    for name, value, min_val, max_val in numeric_validations:
        if value < min_val or value > max_val:
            errors.append(f"{name} must be between {min_val} and {max_val}, got {value}")

    if settings.REQUEST_TIMEOUT <= 0:
        errors.append(f"REQUEST_TIMEOUT must be positive, got {settings.REQUEST_TIMEOUT}")

    if settings.DEFAULT_SORT not in VALID_SORT_KEYS:
        errors.append(f"DEFAULT_SORT must be one of {', '.join(VALID_SORT_KEYS)}, got {settings.DEFAULT_SORT}")

    if settings.STRICT_SCHEMA:
        logger.info("STRICT_SCHEMA is enabled; payloads without schema_version will be rejected")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration.
    Useful for logging startup state.
    """
    # Import settings here to avoid circular imports
    from config import settings

    return {
        "source": {
            "api_url": settings.CONTENT_API_URL,
            "timeout": settings.REQUEST_TIMEOUT,
            "strict_schema": settings.STRICT_SCHEMA,
            "schema_version": settings.SUPPORTED_SCHEMA_VERSION,
        },
        "display": {
            "items_per_page": settings.ITEMS_PER_PAGE,
            "ad_frequency": settings.AD_FREQUENCY,
            "search_debounce_ms": settings.SEARCH_DEBOUNCE_MS,
            "default_sort": settings.DEFAULT_SORT,
        },
    }
