"""History recorder: append-on-change samples for tracked products."""

from __future__ import annotations

import logging
from datetime import datetime

from ..common.models import PricePoint, SalesPoint, TrackedProduct

logger = logging.getLogger(__name__)


def seed_history(product: TrackedProduct, now: datetime) -> None:
    """Give a new product its first price and sales samples."""
    product.price_history = [PricePoint(price=product.price, timestamp=now)]
    product.sales_history = [SalesPoint(sales=product.sales, timestamp=now)]


def record_changes(
    product: TrackedProduct,
    price: float | None,
    sales: int | None,
    now: datetime,
) -> list[str]:
    """Append a sample for each supplied metric that differs from the stored value.

    Must run before the new values are written onto ``product``. Existing
    samples are never touched.

    Returns:
        Names of the metrics that got a new sample.
    """
    changed: list[str] = []
    if price is not None and price != product.price:
        product.price_history.append(PricePoint(price=price, timestamp=now))
        changed.append("price")
    if sales is not None and sales != product.sales:
        product.sales_history.append(SalesPoint(sales=sales, timestamp=now))
        changed.append("sales")
    if changed:
        logger.debug("History appended for %s: %s", product.id, ", ".join(changed))
    return changed
