from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable, Dict

from features.proxy_monitor.domain.models import CycleReport, ProxyEndpoint

from .notifier import EmailNotifier
from .ports import ProxyProber
from .state_tracker import AvailabilityTracker


logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class ProxyMonitor:
    """Runs one check cycle: probe every endpoint, update state, notify when needed."""

    def __init__(
        self,
        tracker: AvailabilityTracker,
        prober: ProxyProber,
        notifier: EmailNotifier,
        *,
        clock: Callable[[], datetime] = datetime.now,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._tracker = tracker
        self._prober = prober
        self._notifier = notifier
        self._clock = clock
        self._timer = timer

    @property
    def tracker(self) -> AvailabilityTracker:
        return self._tracker

    def run_cycle(self) -> CycleReport:
        started_at = self._clock()
        started = self._timer()
        logger.info("start check at %s", started_at.strftime(TIME_FORMAT))

        outcomes: Dict[ProxyEndpoint, bool] = {}
        for endpoint in self._tracker.endpoints:
            result = self._prober.probe(endpoint)
            outcomes[endpoint] = result.ok
            if result.ok:
                logger.debug("proxy %s ok after %d attempt(s)", endpoint, result.attempts)
            else:
                logger.debug("proxy %s failed after %d attempt(s): %s", endpoint, result.attempts, result.error)

        update = self._tracker.apply(outcomes)
        for endpoint, available in update.transitions.items():
            logger.info("proxy %s change to %s", endpoint, "available" if available else "unavailable")
        still_unavailable = [e for e in update.unavailable if e not in update.transitions]
        for endpoint in still_unavailable:
            logger.info("proxy %s is still unavailable", endpoint)

        availability = self._tracker.snapshot()
        report = CycleReport(
            started_at=started_at,
            transitions=update.transitions,
            availability=availability,
            still_unavailable=still_unavailable,
        )
        if update.transitions or update.any_unavailable:
            report.notification = self._notifier.notify(update.transitions, availability)

        report.duration_seconds = self._timer() - started
        logger.info("check used %.3fs", report.duration_seconds)
        logger.info("finish check at %s", self._clock().strftime(TIME_FORMAT))
        return report
