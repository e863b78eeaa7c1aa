"""Common utilities shared across Shop Tracker modules."""

from .config import Config
from .http_client import HTTPClient
from .logging import setup_logging
from .rate_limiter import RateLimiter

__all__ = ["Config", "HTTPClient", "RateLimiter", "setup_logging"]
