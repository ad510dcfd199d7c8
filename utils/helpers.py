"""
Helper Utility Module

This module provides various helper functions used throughout the Content Browser.
"""

import math
from typing import Optional, Dict, Any
from datetime import datetime, timezone
from urllib.parse import urlparse

from dateutil.parser import parse as parse_date

# Epoch values above this are treated as milliseconds
EPOCH_MILLIS_THRESHOLD = 100_000_000_000


def is_valid_url(url: str) -> bool:
    """
    Check if a URL is valid.

    Args:
        url: The URL to validate

    Returns:
        bool: True if the URL is valid, False otherwise
    """
    try:
        result = urlparse(url)
        return all([result.scheme, result.netloc])
    except Exception:
        return False


def first_present(data: Dict[str, Any], *keys, default: Any = None) -> Any:
    """
    Return the value of the first key present (and not None) in a dictionary.

    Args:
        data: The dictionary to search
        *keys: Candidate keys, in priority order
        default: Value returned when none of the keys are present

    Returns:
        The first non-None value found, or the default
    """
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def to_text(value: Any) -> str:
    """Coerce a JSON scalar to a string; None becomes an empty string."""
    if value is None:
        return ""
    return str(value)


def to_non_negative_int(value: Any) -> int:
    """
    Coerce a JSON value to a non-negative integer.

    Args:
        value: A number, numeric string, or anything else

    Returns:
        int: The value clamped at zero, or 0 if it cannot be converted
    """
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return max(0, int(number))


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a timestamp from an ISO-8601 / free-form string or an epoch number.

    Naive values are assumed to be UTC.

    Args:
        value: The raw timestamp

    Returns:
        Optional[datetime]: A timezone-aware datetime, or None if unparseable
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        if isinstance(value, (int, float)):
            seconds = value / 1000 if abs(value) >= EPOCH_MILLIS_THRESHOLD else value
            return datetime.fromtimestamp(seconds, tz=timezone.utc)

        text = str(value).strip()
        if not text:
            return None
        parsed = parse_date(text)
    except (ValueError, OverflowError, OSError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
