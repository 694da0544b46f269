from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from .monitor import TIME_FORMAT, ProxyMonitor
from .ports import Schedule


logger = logging.getLogger(__name__)


@dataclass
class MonitorScheduler:
    """Alternates between sleeping until the next boundary and running a check cycle."""

    monitor: ProxyMonitor
    schedule: Schedule
    sleep: Callable[[float], None] = time.sleep
    clock: Callable[[], datetime] = datetime.now
    _cycles: int = field(init=False, default=0)

    @property
    def cycles(self) -> int:
        return self._cycles

    def run(self, check_now: bool = False) -> None:
        if check_now:
            self.run_cycle()
        while True:
            self.wait_for_next_run()
            self.run_cycle()

    def wait_for_next_run(self) -> datetime:
        now = self.clock()
        next_run = self.schedule.next_run(now)
        logger.info("next check at %s", next_run.strftime(TIME_FORMAT))
        # Naive local datetimes; timestamp() applies the UTC offset in effect at each instant.
        delay = next_run.timestamp() - now.timestamp()
        if delay > 0:
            self.sleep(delay)
        return next_run

    def run_cycle(self) -> None:
        self._cycles += 1
        try:
            self.monitor.run_cycle()
        except Exception:
            logger.exception("check cycle %d aborted unexpectedly", self._cycles)
