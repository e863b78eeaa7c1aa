"""Recurring alert sweeps on a fixed interval."""

from __future__ import annotations

import logging
import threading

from .evaluator import AlertEvaluator

logger = logging.getLogger(__name__)


class AlertScheduler:
    """Runs :meth:`AlertEvaluator.sweep` every ``interval_seconds``.

    Sweeps run one after another on a single thread, so two sweeps never
    overlap; the interval is measured from the end of one sweep to the start
    of the next. A failing sweep is logged and the loop keeps going.
    """

    def __init__(self, evaluator: AlertEvaluator, interval_seconds: float = 3600.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.evaluator = evaluator
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.runs = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        """Run one sweep, returning the number of alerts fired (0 on failure)."""
        self.runs += 1
        try:
            fired = self.evaluator.sweep()
        except Exception:
            self.failures += 1
            logger.exception("Alert sweep %d failed", self.runs)
            return 0
        return len(fired)

    def run_forever(self, max_runs: int | None = None) -> None:
        """Blocking loop; returns after ``stop()`` or ``max_runs`` sweeps."""
        logger.info("Alert scheduler started (every %.0fs)", self.interval_seconds)
        completed = 0
        while not self._stop.is_set():
            self.run_once()
            completed += 1
            if max_runs is not None and completed >= max_runs:
                break
            self._stop.wait(self.interval_seconds)
        logger.info("Alert scheduler stopped after %d sweep(s)", completed)

    def start(self) -> None:
        """Run the loop on a daemon thread.

        Refused while a previous loop is still alive, including one that
        outlived a ``stop()`` timeout mid-sweep.
        """
        if self.running:
            logger.warning("Alert scheduler already running")
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self.run_forever, name="alert-scheduler", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """Ask the loop to end and wait up to ``timeout`` for it.

        If the loop is still inside a sweep when the wait runs out, the stop
        request stays set and the thread stays referenced, so ``running`` is
        true until that sweep finishes and the loop exits.
        """
        self._stop.set()
        if self._thread is None:
            return
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Alert scheduler still finishing a sweep after %ss", timeout)
            return
        self._thread = None
        self._stop.clear()
