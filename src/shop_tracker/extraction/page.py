"""Read-only page abstraction the field extractor queries.

The extractor only ever asks "first element matching this query" and reads
text or an attribute from it; anything that can answer that (a parsed HTML
document, a browser driver, a test double) can serve as a page.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from bs4 import BeautifulSoup, Tag

from ..common.http_client import HTTPClient

logger = logging.getLogger(__name__)


@runtime_checkable
class PageElement(Protocol):
    def text(self) -> str: ...

    def attribute(self, name: str) -> str | None: ...


@runtime_checkable
class Page(Protocol):
    """Current page handle. Implementations must not mutate the page."""

    url: str

    def find_first(self, query: str) -> PageElement | None: ...


class HtmlElement:
    """PageElement backed by a BeautifulSoup tag."""

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    def text(self) -> str:
        return self._tag.get_text(" ", strip=True)

    def attribute(self, name: str) -> str | None:
        value = self._tag.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value


class HtmlPage:
    """Page over static HTML, queried with CSS selectors.

    Usage:
        page = HtmlPage(html, url="https://shop.example.com/product/123")
        el = page.find_first('[data-e2e="product-title"]')
    """

    def __init__(self, html: str, url: str = "") -> None:
        self.url = url
        self._soup = BeautifulSoup(html, "lxml")

    def find_first(self, query: str) -> HtmlElement | None:
        tag = self._soup.select_one(query)
        if tag is None:
            return None
        return HtmlElement(tag)


def fetch_page(url: str, client: HTTPClient, cache_key: str | None = None) -> HtmlPage:
    """Download ``url`` and wrap the HTML as an :class:`HtmlPage`.

    Raises:
        requests.RequestException: When the fetch fails after retries.
    """
    resp = client.get(url, cache_key=cache_key)
    logger.info("Fetched %s (%d bytes)", url, len(resp.text))
    return HtmlPage(resp.text, url=url)
