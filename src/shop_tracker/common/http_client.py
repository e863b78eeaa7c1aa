"""HTTP client for fetching shop pages: rate limiting, retries, raw HTML cache."""

from __future__ import annotations

import hashlib
import itertools
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any

import requests
from fake_useragent import UserAgent

from .config import Config
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class HTTPClient:
    """HTTP client wrapping a ``requests.Session`` for page fetching.

    - Per-host rate limiting
    - Proxy rotation (round-robin)
    - Retries with exponential backoff on network errors, 429 and 5xx
    - Random User-Agent per request
    - Optional raw HTML caching so a failed extraction can be replayed
    """

    MAX_RETRIES = 3
    BACKOFF_BASE = 2.0

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self._rate_limiter = RateLimiter(self.config.rate_limit_rpm)
        self._session = requests.Session()
        self._ua = UserAgent(fallback="Mozilla/5.0")
        self._proxy_cycle = (
            itertools.cycle(self.config.proxy_list)
            if self.config.proxy_list
            else None
        )

    def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        cache_key: str | None = None,
    ) -> requests.Response:
        """Send a GET request with rate limiting, retries, and caching.

        Args:
            url: Target URL.
            params: Query parameters.
            headers: Extra headers (merged with defaults).
            cache_key: If provided, the response body is saved under the
                raw HTML cache directory.

        Returns:
            requests.Response object.

        Raises:
            requests.RequestException: 4xx other than 429, or after all
                retries are exhausted.
        """
        merged_headers = {"User-Agent": self._ua.random}
        if headers:
            merged_headers.update(headers)

        proxies = None
        if self._proxy_cycle:
            proxy = next(self._proxy_cycle)
            proxies = {"http": proxy, "https": proxy}

        last_exc: Exception | None = None
        for attempt in range(self.MAX_RETRIES):
            self._rate_limiter.wait(url)
            try:
                resp = self._session.get(
                    url,
                    params=params,
                    headers=merged_headers,
                    proxies=proxies,
                    timeout=self.config.request_timeout,
                )
                resp.raise_for_status()
            except requests.RequestException as exc:
                last_exc = exc
                status = getattr(exc.response, "status_code", None)
                if status is not None and 400 <= status < 500 and status != 429:
                    logger.warning("Request to %s failed with %d, not retrying", url, status)
                    raise

                wait_time = self.BACKOFF_BASE ** attempt
                logger.warning(
                    "Request to %s failed (attempt %d/%d): %s, retrying in %.1fs",
                    url,
                    attempt + 1,
                    self.MAX_RETRIES,
                    exc,
                    wait_time,
                )
                time.sleep(wait_time)
                continue

            if cache_key:
                self._cache_response(cache_key, resp.text)
            return resp

        raise last_exc  # type: ignore[misc]

    def _cache_response(self, cache_key: str, html: str) -> Path:
        """Write ``html`` to ``{cache_key}_{date}_{hash}.html`` in the cache dir."""
        cache_dir = self.config.raw_html_cache_abs_dir
        cache_dir.mkdir(parents=True, exist_ok=True)
        date_str = datetime.now().strftime("%Y%m%d")
        content_hash = hashlib.md5(html.encode()).hexdigest()[:8]
        safe_key = "".join(c if c.isalnum() or c in "-_" else "_" for c in cache_key)
        path = cache_dir / f"{safe_key}_{date_str}_{content_hash}.html"
        path.write_text(html, encoding="utf-8")
        logger.debug("Cached HTML: %s", path)
        return path

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
