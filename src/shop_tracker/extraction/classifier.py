"""URL-based page classification.

Decides which extraction profile applies to a page from its URL alone. The
shop is a single-page app, so callers re-run this on every navigation.
"""

from __future__ import annotations

from enum import Enum

PRODUCT_URL_FRAGMENTS = ("/product/", "/item/")
SELLER_URL_FRAGMENTS = ("/shop/", "/@")


class PageKind(str, Enum):
    PRODUCT = "product"
    SELLER = "seller"
    NEITHER = "neither"


def is_product_page(url: str) -> bool:
    return any(fragment in url for fragment in PRODUCT_URL_FRAGMENTS)


def is_seller_page(url: str) -> bool:
    return any(fragment in url for fragment in SELLER_URL_FRAGMENTS)


def classify_page(url: str | None) -> PageKind:
    """Classify ``url`` as a product, seller, or other page.

    Product fragments take precedence: a product URL nested under a shop
    path (``/shop/acme/product/1``) is a product page.
    """
    if not url:
        return PageKind.NEITHER
    if is_product_page(url):
        return PageKind.PRODUCT
    if is_seller_page(url):
        return PageKind.SELLER
    return PageKind.NEITHER
