"""Configuration management for Shop Tracker."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
load_dotenv(_PROJECT_ROOT / ".env")


@dataclass
class Config:
    """Central configuration loaded from environment variables."""

    # Database
    database_path: str = field(
        default_factory=lambda: os.getenv(
            "SHOP_TRACKER_DB_PATH", "data/shop_tracker.db"
        )
    )

    # Page fetching
    proxy_list: list[str] = field(default_factory=list)
    request_timeout: int = 30
    rate_limit_rpm: int = 20
    raw_html_cache_dir: str = field(
        default_factory=lambda: os.getenv(
            "RAW_HTML_CACHE_DIR", "data/raw_html"
        )
    )

    # Extraction
    extraction_profiles_path: str = field(
        default_factory=lambda: os.getenv("EXTRACTION_PROFILES_PATH", "")
    )

    # Quota and alerts
    monthly_limit: int = 10
    alert_interval_minutes: float = 60.0
    notification_icon: str = "icons/icon128.png"
    default_currency: str = "USD"

    def __post_init__(self) -> None:
        """Load overrides from environment."""
        if timeout := os.getenv("REQUEST_TIMEOUT"):
            self.request_timeout = int(timeout)
        if rpm := os.getenv("RATE_LIMIT_REQUESTS_PER_MINUTE"):
            self.rate_limit_rpm = int(rpm)
        if proxies := os.getenv("PROXY_LIST"):
            self.proxy_list = [p.strip() for p in proxies.split(",") if p.strip()]
        if limit := os.getenv("MONTHLY_ANALYSIS_LIMIT"):
            self.monthly_limit = int(limit)
        if minutes := os.getenv("ALERT_INTERVAL_MINUTES"):
            self.alert_interval_minutes = float(minutes)
        if icon := os.getenv("NOTIFICATION_ICON"):
            self.notification_icon = icon
        if currency := os.getenv("DEFAULT_CURRENCY"):
            self.default_currency = currency

    @property
    def database_abs_path(self) -> Path:
        """Resolve database path relative to project root."""
        return self._resolve(self.database_path)

    @property
    def raw_html_cache_abs_dir(self) -> Path:
        """Resolve raw HTML cache dir relative to project root."""
        return self._resolve(self.raw_html_cache_dir)

    @property
    def extraction_profiles_abs_path(self) -> Path | None:
        if not self.extraction_profiles_path:
            return None
        return self._resolve(self.extraction_profiles_path)

    @staticmethod
    def _resolve(path: str) -> Path:
        p = Path(path)
        if p.is_absolute():
            return p
        return _PROJECT_ROOT / p
