"""Persistent Tracking Store - document store, history, quota and stats."""

from .backend import MemoryBackend, SQLiteBackend, StorageError, get_connection, init_db
from .history import record_changes, seed_history
from .quota import QuotaGate
from .stats import DashboardStats, dashboard_stats, price_change_percent, sort_products
from .store import TrackingStore

__all__ = [
    "DashboardStats",
    "MemoryBackend",
    "QuotaGate",
    "SQLiteBackend",
    "StorageError",
    "TrackingStore",
    "dashboard_stats",
    "get_connection",
    "init_db",
    "price_change_percent",
    "record_changes",
    "seed_history",
    "sort_products",
]
