from __future__ import annotations

import logging

from features.proxy_monitor.application.monitor import ProxyMonitor
from features.proxy_monitor.application.notifier import EmailNotifier
from features.proxy_monitor.application.ports import Schedule
from features.proxy_monitor.application.scheduler import MonitorScheduler
from features.proxy_monitor.application.state_tracker import AvailabilityTracker
from features.proxy_monitor.domain.errors import ConfigurationError
from features.proxy_monitor.domain.models import validate_endpoint
from features.proxy_monitor.domain.schedule import DailySchedule, HourlySchedule

from .prober import RequestsProxyProber
from .settings import MonitorConfig
from .smtp_transport import SmtpMailTransport


logger = logging.getLogger(__name__)


def build_schedule(config: MonitorConfig) -> Schedule:
    if config.schedule == "hourly":
        return HourlySchedule()
    return DailySchedule(hour=config.check_hour)


def build_notifier(config: MonitorConfig) -> EmailNotifier:
    transport = None
    if config.smtp_addr:
        transport = SmtpMailTransport(
            addr=config.smtp_addr,
            username=config.smtp_user,
            password=config.smtp_password,
        )
    return EmailNotifier(
        transport=transport,
        sender=config.smtp_user,
        recipients=list(config.smtp_recipients),
        language=config.language,
        subject_prefix=config.subject_prefix,
        sender_name=config.sender_name,
    )


def build_monitor(config: MonitorConfig) -> ProxyMonitor:
    for endpoint in config.proxies:
        try:
            validate_endpoint(endpoint)
        except ConfigurationError as exc:
            logger.warning("configured proxy will always fail: %s", exc)
    tracker = AvailabilityTracker(config.proxies)
    prober = RequestsProxyProber(test_url=config.probe_url, timeout=config.probe_timeout)
    return ProxyMonitor(tracker=tracker, prober=prober, notifier=build_notifier(config))


def build_scheduler(config: MonitorConfig) -> MonitorScheduler:
    return MonitorScheduler(monitor=build_monitor(config), schedule=build_schedule(config))
