"""Shared Pydantic data models for Shop Tracker.

These models define the persisted document: every subsystem (store, quota
gate, alert evaluator, stats) reads and writes through them.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Collision-resistant opaque id for stored entities."""
    return str(uuid.uuid4())


def next_month_reset(now: datetime) -> datetime:
    """First instant (00:00 UTC) of the month following ``now``."""
    if now.month == 12:
        return datetime(now.year + 1, 1, 1, tzinfo=timezone.utc)
    return datetime(now.year, now.month + 1, 1, tzinfo=timezone.utc)


# === Enums ===

class AlertDirection(str, Enum):
    """Which side of the target price fires an alert."""
    BELOW = "below"
    ABOVE = "above"


class CompetitionLevel(str, Enum):
    """Competition level of a trending keyword."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# === History samples ===

class PricePoint(BaseModel):
    """One price sample of a tracked product."""
    price: float = Field(ge=0)
    timestamp: datetime


class SalesPoint(BaseModel):
    """One sales-count sample of a tracked product."""
    sales: int = Field(ge=0)
    timestamp: datetime


# === Entities ===

class TrackedProduct(BaseModel):
    """A product the user follows, with append-only price and sales history."""
    id: str
    name: str
    price: float = Field(default=0.0, ge=0)
    original_price: float | None = None
    sales: int = Field(default=0, ge=0)
    rating: float = Field(default=0.0, ge=0, le=5)
    reviews: int = Field(default=0, ge=0)
    category: str = "General"
    seller: str = "Unknown Seller"
    url: str = ""
    image_url: str | None = None
    added_at: datetime
    last_updated: datetime
    price_history: list[PricePoint] = Field(default_factory=list)
    sales_history: list[SalesPoint] = Field(default_factory=list)


class Competitor(BaseModel):
    """A followed seller/shop. No history series."""
    id: str
    name: str
    shop_url: str = ""
    products: int = Field(default=0, ge=0)
    followers: int = Field(default=0, ge=0)
    rating: float = Field(default=0.0, ge=0, le=5)
    added_at: datetime
    last_updated: datetime


class TrendingItem(BaseModel):
    """A detected trending keyword."""
    id: str
    keyword: str
    category: str = "General"
    growth: float = Field(default=0.0, description="Growth in percent")
    volume: int = Field(default=0, ge=0)
    competition: CompetitionLevel = CompetitionLevel.MEDIUM
    detected_at: datetime


class PriceAlert(BaseModel):
    """Price threshold alert on a tracked product.

    ``triggered`` only ever goes from False to True.
    """
    id: str
    product_id: str
    product_name: str
    target_price: float = Field(gt=0)
    current_price: float = Field(ge=0)
    type: AlertDirection
    triggered: bool = False
    created_at: datetime


class UsageData(BaseModel):
    """Monthly analysis quota window."""
    analyses_used: int = Field(default=0, ge=0)
    monthly_limit: int = Field(default=10, ge=0)
    reset_date: datetime
    is_pro: bool = False

    def allows(self) -> bool:
        return self.is_pro or self.analyses_used < self.monthly_limit


class Settings(BaseModel):
    """User settings. ``api_key`` is stored in plaintext."""
    api_key: str = ""
    onboarding_complete: bool = False
    notifications: bool = True
    auto_track: bool = False
    currency: str = "USD"


class StorageDocument(BaseModel):
    """Aggregate root persisted as a single document."""
    tracked_products: list[TrackedProduct] = Field(default_factory=list)
    competitors: list[Competitor] = Field(default_factory=list)
    trends: list[TrendingItem] = Field(default_factory=list)
    usage: UsageData
    settings: Settings = Field(default_factory=Settings)
    price_alerts: list[PriceAlert] = Field(default_factory=list)

    def find_product(self, product_id: str) -> TrackedProduct | None:
        for product in self.tracked_products:
            if product.id == product_id:
                return product
        return None

    def field_json(self, *names: str) -> dict:
        """JSON-ready dict of the given top-level fields only."""
        return self.model_dump(mode="json", include=set(names))


DOCUMENT_FIELDS = tuple(StorageDocument.model_fields)


def default_document(
    now: datetime | None = None,
    monthly_limit: int = 10,
    currency: str = "USD",
) -> dict:
    """JSON-ready defaults for a first-ever read: empty collections, fresh quota."""
    now = now or utc_now()
    doc = StorageDocument(
        usage=UsageData(monthly_limit=monthly_limit, reset_date=next_month_reset(now)),
        settings=Settings(currency=currency),
    )
    return doc.model_dump(mode="json")
