from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class DailySchedule:
    """Fires once a day at ``hour``:00 local time."""

    hour: int = 19

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise ValueError(f"hour must be within 0-23, got {self.hour}")

    def next_run(self, now: datetime) -> datetime:
        candidate = now.replace(hour=self.hour, minute=0, second=0, microsecond=0)
        if candidate <= now:
            candidate += timedelta(days=1)
        return candidate


@dataclass(frozen=True)
class HourlySchedule:
    """Fires at the top of every hour."""

    def next_run(self, now: datetime) -> datetime:
        return now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
