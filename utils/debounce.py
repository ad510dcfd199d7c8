"""
Debounce Utility

A small timer-plus-cancellation helper: every call restarts the quiet period,
and only the last call within the window runs. Earlier pending calls are
discarded, never queued.
"""

import threading
from typing import Callable, Optional, Any


class Debouncer:
    """Delay a function until calls stop arriving for `wait` seconds."""

    def __init__(self, func: Callable[..., Any], wait: float,
                 timer_factory: Optional[Callable[..., Any]] = None):
        """
        Initialize the debouncer.

        Args:
            func: The function to run once the quiet period elapses
            wait: Quiet period in seconds
            timer_factory: Builds the timer, called as timer_factory(wait, callback).
                Defaults to threading.Timer.
        """
        self.func = func
        self.wait = wait
        self.timer_factory = timer_factory or threading.Timer
        self._timer = None
        self._pending = None
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            token = object()
            self._pending = (token, args, kwargs)
            self._timer = self.timer_factory(self.wait, lambda: self._fire(token))
            if hasattr(self._timer, "daemon"):
                self._timer.daemon = True
            self._timer.start()

    def _fire(self, token) -> None:
        with self._lock:
            # A cancelled timer may still fire if it was already running
            if self._pending is None or self._pending[0] is not token:
                return
            _, args, kwargs = self._pending
            self._pending = None
            self._timer = None
        self.func(*args, **kwargs)

    def cancel(self) -> None:
        """Discard the pending call, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

    def flush(self) -> None:
        """Run the pending call immediately, if any."""
        with self._lock:
            if self._pending is None:
                return
            if self._timer is not None:
                self._timer.cancel()
            _, args, kwargs = self._pending
            self._pending = None
            self._timer = None
        self.func(*args, **kwargs)

    @property
    def pending(self) -> bool:
        return self._pending is not None
