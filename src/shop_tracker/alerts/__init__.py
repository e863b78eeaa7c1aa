"""Alert/Quota evaluation - price alert sweeps and notification requests."""

from .evaluator import AlertEvaluator, should_fire
from .notifier import LogNotifier, NotificationRequest, Notifier, build_alert_notification
from .scheduler import AlertScheduler

__all__ = [
    "AlertEvaluator",
    "AlertScheduler",
    "LogNotifier",
    "NotificationRequest",
    "Notifier",
    "build_alert_notification",
    "should_fire",
]
