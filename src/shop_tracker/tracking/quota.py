"""Monthly analysis quota gate."""

from __future__ import annotations

import logging

from .store import TrackingStore

logger = logging.getLogger(__name__)


class QuotaGate:
    """Answers whether a metered action may run, and counts it when it does.

    Every call starts with a fresh store read, which also rolls the window
    over when the month has ended.
    """

    def __init__(self, store: TrackingStore) -> None:
        self.store = store

    def may_proceed(self) -> bool:
        return self.store.read().usage.allows()

    def remaining(self) -> int | None:
        """Analyses left in the current window; None when unmetered (Pro)."""
        usage = self.store.read().usage
        if usage.is_pro:
            return None
        return max(usage.monthly_limit - usage.analyses_used, 0)

    def consume(self) -> bool:
        """Count one analysis if the quota allows it.

        The condition is checked again on the document being written, not on
        an earlier ``may_proceed`` answer.

        Returns:
            True if the unit was granted and recorded, False if denied.
        """
        doc = self.store.read()
        usage = doc.usage
        if not usage.allows():
            logger.info(
                "Quota exhausted: %d/%d used, resets %s",
                usage.analyses_used,
                usage.monthly_limit,
                usage.reset_date.date().isoformat(),
            )
            return False

        usage.analyses_used += 1
        self.store.write(doc, "usage")
        logger.info("Quota unit consumed (%d/%d)", usage.analyses_used, usage.monthly_limit)
        return True
