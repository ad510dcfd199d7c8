"""
Lazy Image Loading

Models the browser's "observe element, fire when visible" primitive: each
registered image fires its callback exactly once, on first visibility, and
is then deregistered.
"""

import threading
from typing import Callable, Dict, List

from utils.logger import get_logger

logger = get_logger(__name__)


class LazyImageLoader:
    """One-shot visibility observers keyed by node key."""

    def __init__(self):
        self._observers: Dict[str, Callable[[str], None]] = {}
        self._lock = threading.Lock()

    def observe(self, key: str, callback: Callable[[str], None]) -> None:
        """Register a callback for when the image with this key becomes visible."""
        with self._lock:
            self._observers[key] = callback

    def unobserve(self, key: str) -> None:
        with self._lock:
            self._observers.pop(key, None)

    def notify_visible(self, key: str) -> bool:
        """
        Report that an image became visible.

        Returns:
            bool: True if a callback fired, False if the key was not (or no longer) observed.
        """
        with self._lock:
            callback = self._observers.pop(key, None)
        if callback is None:
            return False
        logger.debug(f"Image {key} visible, loading")
        callback(key)
        return True

    def clear(self) -> None:
        """Drop every pending observer, e.g. when the grid is replaced."""
        with self._lock:
            self._observers.clear()

    def pending(self) -> List[str]:
        with self._lock:
            return list(self._observers)
