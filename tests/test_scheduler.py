import time
from datetime import datetime

import pytest

from features.proxy_monitor.application.scheduler import MonitorScheduler
from features.proxy_monitor.domain.schedule import DailySchedule, HourlySchedule


class _Stop(Exception):
    pass


class CountingMonitor:
    def __init__(self, fail=False):
        self.runs = 0
        self.fail = fail

    def run_cycle(self):
        self.runs += 1
        if self.fail:
            raise RuntimeError("boom")


def test_daily_schedule_uses_today_when_before_target():
    assert DailySchedule(19).next_run(datetime(2024, 3, 5, 8, 30)) == datetime(2024, 3, 5, 19, 0)


def test_daily_schedule_rolls_to_next_day_when_passed():
    assert DailySchedule(19).next_run(datetime(2024, 3, 5, 19, 0)) == datetime(2024, 3, 6, 19, 0)
    assert DailySchedule(19).next_run(datetime(2024, 3, 31, 21, 15)) == datetime(2024, 4, 1, 19, 0)


def test_daily_schedule_rejects_invalid_hour():
    with pytest.raises(ValueError):
        DailySchedule(24)


def test_hourly_schedule_rolls_over_midnight():
    assert HourlySchedule().next_run(datetime(2024, 12, 31, 23, 59, 59)) == datetime(2025, 1, 1, 0, 0)
    assert HourlySchedule().next_run(datetime(2024, 3, 5, 10, 0)) == datetime(2024, 3, 5, 11, 0)


def _scheduler(monitor, sleeps, stop_after):
    def sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) >= stop_after:
            raise _Stop()

    return MonitorScheduler(
        monitor=monitor,
        schedule=DailySchedule(19),
        sleep=sleep,
        clock=lambda: datetime(2024, 3, 5, 18, 0),
    )


def test_check_now_runs_before_first_sleep():
    monitor = CountingMonitor()
    sleeps = []
    with pytest.raises(_Stop):
        _scheduler(monitor, sleeps, stop_after=1).run(check_now=True)
    assert monitor.runs == 1
    assert sleeps == [3600.0]


def test_loop_sleeps_then_checks_repeatedly():
    monitor = CountingMonitor()
    sleeps = []
    with pytest.raises(_Stop):
        _scheduler(monitor, sleeps, stop_after=3).run()
    assert monitor.runs == 2
    assert len(sleeps) == 3


def test_cycle_exception_does_not_stop_the_loop():
    monitor = CountingMonitor(fail=True)
    sleeps = []
    scheduler = _scheduler(monitor, sleeps, stop_after=3)
    with pytest.raises(_Stop):
        scheduler.run(check_now=True)
    assert monitor.runs == 3
    assert scheduler.cycles == 3


@pytest.fixture
def new_york_tz(monkeypatch):
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    try:
        if time.tzname != ("EST", "EDT"):
            pytest.skip("America/New_York zone data is not installed")
        yield
    finally:
        monkeypatch.undo()
        time.tzset()


def test_sleep_spans_dst_change_in_wall_clock_time(new_york_tz):
    monitor = CountingMonitor()
    sleeps = []
    scheduler = MonitorScheduler(
        monitor=monitor,
        schedule=DailySchedule(19),
        sleep=sleeps.append,
        clock=lambda: datetime(2024, 3, 10, 1, 0),
    )

    assert scheduler.wait_for_next_run() == datetime(2024, 3, 10, 19, 0)
    # Clocks spring forward at 02:00, so 01:00 EST to 19:00 EDT is 17 hours.
    assert sleeps == [17 * 3600.0]
