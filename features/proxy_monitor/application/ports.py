from __future__ import annotations

from datetime import datetime
from typing import Protocol

from features.proxy_monitor.domain.models import ProbeResult, ProxyEndpoint
from features.proxy_monitor.domain.notification import NotificationMessage


class ProxyProber(Protocol):
    def probe(self, endpoint: ProxyEndpoint) -> ProbeResult:
        """Check one proxy endpoint, retrying transient failures."""


class MailTransport(Protocol):
    def send(self, message: NotificationMessage) -> None:
        """Submit a rendered message to the mail relay or raise NotificationDispatchError."""


class Schedule(Protocol):
    def next_run(self, now: datetime) -> datetime:
        """Return the next instant strictly after ``now`` at which a cycle should start."""
