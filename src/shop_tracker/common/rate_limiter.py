"""Per-host rate limiter for polite page fetching."""

from __future__ import annotations

import threading
import time
from urllib.parse import urlsplit


class RateLimiter:
    """Thread-safe rate limiter keeping one request slot per host.

    Pages from different shop hosts do not throttle each other; repeated
    requests to the same host are spaced at least ``60 / requests_per_minute``
    seconds apart.

    Args:
        requests_per_minute: Maximum requests allowed per minute and host.
    """

    def __init__(self, requests_per_minute: int = 20) -> None:
        self._interval = 60.0 / max(requests_per_minute, 1)
        self._last_request: dict[str, float] = {}
        self._lock = threading.Lock()

    @property
    def interval(self) -> float:
        return self._interval

    def wait(self, url: str = "") -> None:
        """Block until the next request to ``url``'s host is allowed."""
        host = urlsplit(url).netloc.lower()
        with self._lock:
            last = self._last_request.get(host)
            if last is not None:
                elapsed = time.monotonic() - last
                if elapsed < self._interval:
                    time.sleep(self._interval - elapsed)
            self._last_request[host] = time.monotonic()
