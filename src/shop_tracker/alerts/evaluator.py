"""Price alert evaluation.

Alert lifecycle: pending (triggered=False) -> fired (triggered=True). Fired
is terminal; a fired alert is never looked at again.
"""

from __future__ import annotations

import logging

from ..common.models import AlertDirection, PriceAlert, TrackedProduct
from ..tracking.store import TrackingStore
from .notifier import LogNotifier, Notifier, build_alert_notification

logger = logging.getLogger(__name__)


def should_fire(alert: PriceAlert, product: TrackedProduct) -> bool:
    if alert.type is AlertDirection.BELOW:
        return product.price <= alert.target_price
    return product.price >= alert.target_price


class AlertEvaluator:
    """One sweep over all pending alerts.

    Usage:
        evaluator = AlertEvaluator(store, notifier)
        fired = evaluator.sweep()
    """

    def __init__(self, store: TrackingStore, notifier: Notifier | None = None) -> None:
        self.store = store
        self.notifier = notifier or LogNotifier()

    def sweep(self) -> list[PriceAlert]:
        """Fire every pending alert whose product crossed its target.

        Reads the document once and writes all flipped alerts in one write.
        Alerts on products no longer tracked are skipped and left pending.
        With notifications disabled, matching alerts still flip to fired but
        no notification goes out.

        Returns:
            Alerts fired in this sweep.
        """
        doc = self.store.read()
        settings = doc.settings
        fired: list[PriceAlert] = []

        for alert in doc.price_alerts:
            if alert.triggered:
                continue

            product = doc.find_product(alert.product_id)
            if product is None:
                logger.debug("Alert %s references missing product %s", alert.id, alert.product_id)
                continue

            if not should_fire(alert, product):
                continue

            alert.triggered = True
            fired.append(alert)
            logger.info(
                "Alert %s fired: %s at %.2f (%s %.2f)",
                alert.id,
                product.name,
                product.price,
                alert.type.value,
                alert.target_price,
            )

            if not settings.notifications:
                logger.info("Notifications disabled, alert %s fired silently", alert.id)
                continue

            request = build_alert_notification(
                product.name,
                product.price,
                alert.target_price,
                icon=self.store.config.notification_icon,
                currency=settings.currency,
            )
            # Delivery is not tracked: a failed send must not undo the flip.
            try:
                self.notifier.notify(request)
            except Exception:
                logger.exception("Notification for alert %s failed", alert.id)

        if fired:
            self.store.write(doc, "price_alerts")
        logger.debug("Alert sweep done: %d fired", len(fired))
        return fired
