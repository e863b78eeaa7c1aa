"""Notification boundary for fired price alerts.

The evaluator hands over a :class:`NotificationRequest`; delivery and
acknowledgement belong to whatever implements :class:`Notifier`.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

ALERT_TITLE = "Shop Tracker - Price Alert!"


@dataclass(frozen=True)
class NotificationRequest:
    title: str
    body: str
    icon: str

    def to_dict(self) -> dict:
        return asdict(self)


class Notifier(Protocol):
    def notify(self, request: NotificationRequest) -> None: ...


class LogNotifier:
    """Writes notifications to the log. Default when no platform notifier is wired."""

    def __init__(self, level: int = logging.WARNING) -> None:
        self.level = level

    def notify(self, request: NotificationRequest) -> None:
        logger.log(self.level, "%s %s", request.title, request.body)


def format_price(amount: float, currency: str = "USD") -> str:
    symbols = {"USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥"}
    symbol = symbols.get(currency.upper())
    if symbol:
        return f"{symbol}{amount:,.2f}"
    return f"{amount:,.2f} {currency.upper()}"


def build_alert_notification(
    product_name: str,
    current_price: float,
    target_price: float,
    icon: str,
    currency: str = "USD",
) -> NotificationRequest:
    body = (
        f"{product_name} is now {format_price(current_price, currency)} "
        f"(target: {format_price(target_price, currency)})"
    )
    return NotificationRequest(title=ALERT_TITLE, body=body, icon=icon)
