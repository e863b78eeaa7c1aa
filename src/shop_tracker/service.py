"""Upstream actions into the tracking core.

The UI layer talks to the core through these calls (or through
``handle_message`` with ``{"type": ..., "data": ...}`` messages):

- track product: extracted product fields in, tracked product id out
- track seller: extracted seller fields in, competitor id out
- set alert: product id + target price in, price alert out
- consume quota: one metered unit, granted or denied
"""

from __future__ import annotations

import logging
from typing import Any

from .common.config import Config
from .common.models import PriceAlert
from .extraction.extractor import PageExtractor
from .extraction.models import ProductData, SellerData
from .extraction.page import Page
from .extraction.profiles import load_profiles
from .tracking.quota import QuotaGate
from .tracking.store import TrackingStore

logger = logging.getLogger(__name__)


class TrackerService:
    """Facade over extraction, store and quota gate.

    Usage:
        service = TrackerService(TrackingStore(backend, config))
        product_id = service.track_product(product_data)
    """

    def __init__(
        self,
        store: TrackingStore,
        extractor: PageExtractor | None = None,
    ) -> None:
        self.store = store
        self.quota = QuotaGate(store)
        self.extractor = extractor or PageExtractor(
            load_profiles(store.config.extraction_profiles_abs_path)
        )

    @classmethod
    def from_config(cls, config: Config | None = None) -> TrackerService:
        config = config or Config()
        return cls(TrackingStore(config=config))

    def track_product(self, data: ProductData | dict[str, Any]) -> str:
        product = self.store.add_tracked_product(data)
        return product.id

    def track_seller(self, data: SellerData | dict[str, Any]) -> str:
        competitor = self.store.add_competitor(data)
        return competitor.id

    def set_alert(self, product_id: str, target_price: float) -> PriceAlert | None:
        return self.store.add_price_alert(product_id, target_price)

    def consume_quota(self) -> bool:
        return self.quota.consume()

    def extract_and_track(self, page: Page) -> str | None:
        """Extract whatever the page offers and track it.

        Returns:
            The new entity id, or None when extraction is unavailable.
        """
        record = self.extractor.extract(page, page.url)
        if record is None:
            return None
        if isinstance(record, ProductData):
            return self.track_product(record)
        return self.track_seller(record)

    def handle_message(self, message: dict[str, Any]) -> dict[str, Any]:
        """Dispatch a UI message, answering ``{"success": bool, ...}``.

        Never raises: handler failures are logged and reported.
        """
        msg_type = message.get("type")
        data = message.get("data") or {}

        handlers = {
            "TRACK_PRODUCT": lambda: {"id": self.track_product(data)},
            "TRACK_SELLER": lambda: {"id": self.track_seller(data)},
            "GET_STORAGE": lambda: {"data": self.store.read().model_dump(mode="json")},
        }
        handler = handlers.get(msg_type)
        if handler is None:
            return {"success": False, "error": "Unknown message type"}

        try:
            result = handler()
        except Exception:
            logger.exception("Message %s failed", msg_type)
            return {"success": False, "error": f"Failed to handle {msg_type}"}
        return {"success": True, **result}
