"""Dashboard statistics over the tracking document."""

from __future__ import annotations

from pydantic import BaseModel

from ..common.models import StorageDocument, TrackedProduct

SORT_KEYS = ("recent", "sales", "price", "rating")


class PriceChange(BaseModel):
    name: str
    old_price: float
    new_price: float
    change_percent: float


class DashboardStats(BaseModel):
    tracked_products: int
    total_sales: int
    competitors: int
    active_trends: int
    avg_price: float
    avg_rating: float
    triggered_alerts: int
    top_product: str | None = None
    recent_changes: list[PriceChange] = []


def price_change_percent(product: TrackedProduct) -> float | None:
    """Percent change between the last two price samples.

    None when there is no previous sample or the previous price was 0.
    """
    if len(product.price_history) < 2:
        return None
    previous = product.price_history[-2].price
    if previous == 0:
        return None
    return (product.price - previous) / previous * 100


def sort_products(products: list[TrackedProduct], key: str = "recent") -> list[TrackedProduct]:
    """Return a sorted copy, largest first ('recent' = newest added first)."""
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key '{key}', expected one of {SORT_KEYS}")
    attr = "added_at" if key == "recent" else key
    return sorted(products, key=lambda p: getattr(p, attr), reverse=True)


def dashboard_stats(doc: StorageDocument, max_changes: int = 3) -> DashboardStats:
    products = doc.tracked_products
    count = len(products)

    changes: list[PriceChange] = []
    for product in products:
        percent = price_change_percent(product)
        if percent is None:
            continue
        changes.append(
            PriceChange(
                name=product.name,
                old_price=product.price_history[-2].price,
                new_price=product.price,
                change_percent=round(percent, 2),
            )
        )
        if len(changes) == max_changes:
            break

    top = max(products, key=lambda p: p.sales) if products else None

    return DashboardStats(
        tracked_products=count,
        total_sales=sum(p.sales for p in products),
        competitors=len(doc.competitors),
        active_trends=len(doc.trends),
        avg_price=sum(p.price for p in products) / count if count else 0.0,
        avg_rating=sum(p.rating for p in products) / count if count else 0.0,
        triggered_alerts=sum(1 for a in doc.price_alerts if a.triggered),
        top_product=top.name if top else None,
        recent_changes=changes,
    )
