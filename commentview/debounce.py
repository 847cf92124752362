"""Per-document rate limiting for re-parses.

The first event for a document runs immediately; later events within the
window are dropped rather than deferred, so a burst of edits costs at most
one parse per window.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Hashable

from .config import DEFAULT_DEBOUNCE_SECONDS


class Debouncer:
    """Leading-edge, trailing-suppressed limiter keyed by document."""

    def __init__(
        self,
        interval_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval_seconds = max(0.0, interval_seconds)
        self._monotonic = monotonic
        self._last_run: dict[Hashable, float] = {}

    def should_run(self, key: Hashable) -> bool:
        """Return whether an event for ``key`` may run now, recording it if so."""
        now = self._monotonic()
        last = self._last_run.get(key)
        if last is not None and (now - last) < self.interval_seconds:
            return False
        self._last_run[key] = now
        return True

    def forget(self, key: Hashable) -> None:
        """Drop timing for ``key`` so its next event runs immediately."""
        self._last_run.pop(key, None)
