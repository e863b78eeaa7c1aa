"""Persistent tracking store.

Owns the single tracking document. Every operation is read full document ->
compute the new collection -> write back only the fields it touched. There
is no locking across calls: two interleaved writers to the same field lose
one side's update (last write wins).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from ..common.config import Config
from ..common.models import (
    AlertDirection,
    CompetitionLevel,
    Competitor,
    PriceAlert,
    Settings,
    StorageDocument,
    TrackedProduct,
    TrendingItem,
    default_document,
    new_id,
    next_month_reset,
    utc_now,
)
from .backend import DocumentBackend, SQLiteBackend, StorageError
from .history import record_changes, seed_history

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _as_mapping(data: Any) -> dict[str, Any]:
    if isinstance(data, Mapping):
        return dict(data)
    if hasattr(data, "to_dict"):
        return data.to_dict()
    raise TypeError(f"Expected a mapping or record, got {type(data).__name__}")


class TrackingStore:
    """Single-writer store over a :class:`DocumentBackend`.

    Usage:
        store = TrackingStore(SQLiteBackend(config), config)
        product = store.add_tracked_product(product_data)
        store.update_product(product.id, price=17.99)
    """

    MAX_TRENDS = 20

    PRODUCT_FIELDS = frozenset({
        "name", "price", "original_price", "sales", "rating", "reviews",
        "category", "seller", "url", "image_url",
    })
    NULLABLE_PRODUCT_FIELDS = frozenset({"original_price", "image_url"})
    COMPETITOR_FIELDS = frozenset({"name", "shop_url", "products", "followers", "rating"})

    def __init__(
        self,
        backend: DocumentBackend | None = None,
        config: Config | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.config = config or Config()
        self.backend = backend if backend is not None else SQLiteBackend(self.config)
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Document access
    # ------------------------------------------------------------------

    def read(self) -> StorageDocument:
        """Return the full document, rolling the quota window over if due.

        The rollover is persisted before the document is returned, so any
        quota check made on the result sees the fresh window.
        """
        now = self.now()
        raw = self.backend.read(
            default_document(now, self.config.monthly_limit, self.config.default_currency)
        )
        try:
            doc = StorageDocument.model_validate(raw)
        except ValidationError as exc:
            raise StorageError(f"Stored document is malformed: {exc}") from exc

        if now > doc.usage.reset_date:
            logger.info(
                "Quota window ended %s, resetting %d used analyses",
                doc.usage.reset_date.isoformat(),
                doc.usage.analyses_used,
            )
            doc.usage.analyses_used = 0
            doc.usage.reset_date = next_month_reset(now)
            self.write(doc, "usage")

        return doc

    def write(self, doc: StorageDocument, *fields: str) -> None:
        """Persist only the named top-level fields of ``doc``."""
        unknown = set(fields) - set(StorageDocument.model_fields)
        if unknown:
            raise ValueError(f"Unknown document fields: {sorted(unknown)}")
        self.backend.write(doc.field_json(*fields))

    # ------------------------------------------------------------------
    # Tracked products
    # ------------------------------------------------------------------

    def add_tracked_product(self, data: Any) -> TrackedProduct:
        """Track a new product; price and sales histories start with one sample."""
        fields = {k: v for k, v in _as_mapping(data).items() if k in self.PRODUCT_FIELDS}
        doc = self.read()
        now = self.now()
        product = TrackedProduct(id=new_id(), added_at=now, last_updated=now, **fields)
        seed_history(product, now)
        doc.tracked_products.append(product)
        self.write(doc, "tracked_products")
        logger.info("Tracking product %s (%s)", product.id, product.name)
        return product

    def get_product(self, product_id: str) -> TrackedProduct | None:
        return self.read().find_product(product_id)

    def update_product(self, product_id: str, **updates: Any) -> TrackedProduct | None:
        """Apply ``updates`` to a tracked product, appending history first.

        Returns None (and writes nothing) when the id is not tracked.
        A None value leaves a field unchanged, except for the optional
        ``original_price`` and ``image_url``, which it clears.

        Raises:
            ValueError: Unknown field names or invalid values.
        """
        unknown = set(updates) - self.PRODUCT_FIELDS
        if unknown:
            raise ValueError(f"Cannot update product fields: {sorted(unknown)}")

        doc = self.read()
        for index, product in enumerate(doc.tracked_products):
            if product.id == product_id:
                break
        else:
            logger.debug("update_product: %s not tracked, skipping", product_id)
            return None

        now = self.now()
        record_changes(product, updates.get("price"), updates.get("sales"), now)
        # None means "not supplied", except where None is a real value.
        supplied = {
            k: v for k, v in updates.items()
            if v is not None or k in self.NULLABLE_PRODUCT_FIELDS
        }
        merged = product.model_dump()
        merged.update(supplied)
        merged["last_updated"] = now
        updated = TrackedProduct.model_validate(merged)

        doc.tracked_products[index] = updated
        self.write(doc, "tracked_products")
        logger.info("Updated product %s (%s)", product_id, ", ".join(sorted(updates)) or "touch")
        return updated

    def remove_tracked_product(self, product_id: str) -> None:
        doc = self.read()
        doc.tracked_products = [p for p in doc.tracked_products if p.id != product_id]
        self.write(doc, "tracked_products")
        logger.info("Removed product %s", product_id)

    # ------------------------------------------------------------------
    # Competitors
    # ------------------------------------------------------------------

    def add_competitor(self, data: Any) -> Competitor:
        fields = {k: v for k, v in _as_mapping(data).items() if k in self.COMPETITOR_FIELDS}
        doc = self.read()
        now = self.now()
        competitor = Competitor(id=new_id(), added_at=now, last_updated=now, **fields)
        doc.competitors.append(competitor)
        self.write(doc, "competitors")
        logger.info("Tracking competitor %s (%s)", competitor.id, competitor.name)
        return competitor

    def remove_competitor(self, competitor_id: str) -> None:
        doc = self.read()
        doc.competitors = [c for c in doc.competitors if c.id != competitor_id]
        self.write(doc, "competitors")
        logger.info("Removed competitor %s", competitor_id)

    # ------------------------------------------------------------------
    # Price alerts
    # ------------------------------------------------------------------

    def add_price_alert(self, product_id: str, target_price: float) -> PriceAlert | None:
        """Create an alert on a tracked product.

        The direction is fixed now: ``below`` when the target is under the
        current price, ``above`` otherwise.

        Returns:
            The new alert, or None when the product is not tracked.

        Raises:
            ValueError: If target_price is not positive.
        """
        if target_price <= 0:
            raise ValueError("target_price must be positive")

        doc = self.read()
        product = doc.find_product(product_id)
        if product is None:
            logger.debug("add_price_alert: %s not tracked, skipping", product_id)
            return None

        direction = (
            AlertDirection.BELOW if target_price < product.price else AlertDirection.ABOVE
        )
        alert = PriceAlert(
            id=new_id(),
            product_id=product.id,
            product_name=product.name,
            target_price=target_price,
            current_price=product.price,
            type=direction,
            triggered=False,
            created_at=self.now(),
        )
        doc.price_alerts.append(alert)
        self.write(doc, "price_alerts")
        logger.info(
            "Alert %s: %s %s %.2f", alert.id, product.name, direction.value, target_price
        )
        return alert

    def remove_price_alert(self, alert_id: str) -> None:
        doc = self.read()
        doc.price_alerts = [a for a in doc.price_alerts if a.id != alert_id]
        self.write(doc, "price_alerts")
        logger.info("Removed alert %s", alert_id)

    # ------------------------------------------------------------------
    # Trends
    # ------------------------------------------------------------------

    def add_trend(
        self,
        keyword: str,
        category: str = "General",
        growth: float = 0.0,
        volume: int = 0,
        competition: CompetitionLevel | str = CompetitionLevel.MEDIUM,
    ) -> TrendingItem:
        """Insert a trend at the head, keeping only the newest MAX_TRENDS."""
        doc = self.read()
        trend = TrendingItem(
            id=new_id(),
            keyword=keyword,
            category=category,
            growth=growth,
            volume=volume,
            competition=CompetitionLevel(competition),
            detected_at=self.now(),
        )
        doc.trends = [trend, *doc.trends][: self.MAX_TRENDS]
        self.write(doc, "trends")
        logger.info("Trend %s (%s) recorded, %d kept", trend.id, keyword, len(doc.trends))
        return trend

    def remove_trend(self, trend_id: str) -> None:
        doc = self.read()
        doc.trends = [t for t in doc.trends if t.id != trend_id]
        self.write(doc, "trends")
        logger.info("Removed trend %s", trend_id)

    # ------------------------------------------------------------------
    # Settings and housekeeping
    # ------------------------------------------------------------------

    def update_settings(self, **changes: Any) -> Settings:
        """Shallow-merge ``changes`` into the settings."""
        unknown = set(changes) - set(Settings.model_fields)
        if unknown:
            raise ValueError(f"Unknown settings: {sorted(unknown)}")

        doc = self.read()
        doc.settings = Settings.model_validate({**doc.settings.model_dump(), **changes})
        self.write(doc, "settings")
        # api_key is sensitive, never log values
        logger.info("Settings updated: %s", ", ".join(sorted(changes)))
        return doc.settings

    def get_api_key(self) -> str:
        return self.read().settings.api_key

    def set_api_key(self, api_key: str) -> None:
        self.update_settings(api_key=api_key.strip())

    def clear_all_data(self) -> None:
        """Drop every tracked entity; usage and settings are kept."""
        doc = self.read()
        doc.tracked_products = []
        doc.competitors = []
        doc.trends = []
        doc.price_alerts = []
        self.write(doc, "tracked_products", "competitors", "trends", "price_alerts")
        logger.info("Cleared all tracked data")

    def reset_usage(self) -> None:
        """Zero the usage counter without moving the window."""
        doc = self.read()
        doc.usage.analyses_used = 0
        self.write(doc, "usage")
        logger.info("Usage counter reset")
