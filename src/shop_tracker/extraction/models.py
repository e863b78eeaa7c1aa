"""Data records produced by page extraction."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass
class ProductData:
    """Product fields recovered from a product page.

    Only ``name`` is guaranteed; everything else falls back to its empty value.
    """

    name: str
    price: float = 0.0
    original_price: float | None = None
    sales: int = 0
    rating: float = 0.0
    reviews: int = 0
    category: str = "General"
    seller: str = "Unknown Seller"
    url: str = ""
    image_url: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SellerData:
    """Seller/shop fields recovered from a shop page."""

    name: str
    shop_url: str = ""
    products: int = 0
    followers: int = 0
    rating: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)
