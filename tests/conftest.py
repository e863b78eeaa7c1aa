"""Shared test fixtures for Shop Tracker."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure the package under src/ is importable without installation
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from shop_tracker.common.config import Config
from shop_tracker.extraction.page import HtmlPage
from shop_tracker.tracking.backend import MemoryBackend, SQLiteBackend
from shop_tracker.tracking.store import TrackingStore


class FrozenClock:
    """Callable clock the tests move by hand."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def temp_config(tmp_path) -> Config:
    """Config pointing at a temporary SQLite database and cache dir."""
    return Config(
        database_path=str(tmp_path / "test_shop_tracker.db"),
        raw_html_cache_dir=str(tmp_path / "raw_html"),
    )


@pytest.fixture
def memory_backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(memory_backend, temp_config, clock) -> TrackingStore:
    return TrackingStore(memory_backend, temp_config, clock=clock)


@pytest.fixture
def sqlite_store(temp_config, clock) -> TrackingStore:
    return TrackingStore(SQLiteBackend(temp_config), temp_config, clock=clock)


@pytest.fixture
def sample_product_data() -> dict:
    return {
        "name": "Mini Portable Blender",
        "price": 19.99,
        "original_price": 29.99,
        "sales": 12300,
        "rating": 4.7,
        "reviews": 1520,
        "category": "Kitchen",
        "seller": "BlendCo Official",
        "url": "https://shop.example.com/product/1729",
        "image_url": "https://cdn.example.com/blender.jpg",
    }


@pytest.fixture
def sample_seller_data() -> dict:
    return {
        "name": "BlendCo Official",
        "shop_url": "https://shop.example.com/shop/blendco",
        "products": 48,
        "followers": 1_200_000,
        "rating": 4.8,
    }


@pytest.fixture
def product_page() -> HtmlPage:
    html = """
    <html><body>
      <div class="breadcrumb"><ul><li>Home</li><li>Kitchen</li></ul></div>
      <h1 data-e2e="product-title">  Mini Portable Blender  </h1>
      <div class="product-price">$19.99</div>
      <del>$29.99</del>
      <span data-e2e="sold-count">12.3K sold</span>
      <span data-e2e="product-rating">4.7</span>
      <span data-e2e="review-count">1,520 reviews</span>
      <a data-e2e="seller-name">BlendCo Official</a>
      <div data-e2e="product-image"><img src="https://cdn.example.com/blender.jpg"></div>
    </body></html>
    """
    return HtmlPage(html, url="https://shop.example.com/product/1729")


@pytest.fixture
def seller_page() -> HtmlPage:
    html = """
    <html><body>
      <h2 data-e2e="shop-name">BlendCo Official</h2>
      <span data-e2e="follower-count">1.2M followers</span>
      <span data-e2e="product-count">48 products</span>
      <span data-e2e="shop-rating">4.8</span>
    </body></html>
    """
    return HtmlPage(html, url="https://shop.example.com/shop/blendco")
