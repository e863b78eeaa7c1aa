"""Logging set-up for the Shop Tracker CLI and scheduler.

Library modules only call ``logging.getLogger(__name__)`` and never attach
handlers; an entry point calls :func:`setup_logging` once. Everything under
the ``shop_tracker`` namespace then reaches stdout, store mutations and alert
firings at INFO, strategy matches at DEBUG. The connection-pool chatter of
``urllib3`` and the User-Agent lookup of ``fake_useragent`` are held at
WARNING so retries from the HTTP client stay readable.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NOISY_LOGGERS = ("urllib3", "fake_useragent")


def setup_logging(
    level: int = logging.INFO,
    module_name: str = "shop_tracker",
) -> logging.Logger:
    """Attach a stdout handler to ``module_name``'s logger.

    Calling it again for the same name returns the logger untouched, so
    sub-commands and the scheduler loop can both call it safely.
    """
    logger = logging.getLogger(module_name)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger
