from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from features.proxy_monitor.domain.errors import ConfigurationError, NotificationDispatchError
from features.proxy_monitor.domain.models import NotifyOutcome, ProxyEndpoint
from features.proxy_monitor.domain.notification import LABELS, Labels, NotificationMessage

from .ports import MailTransport


logger = logging.getLogger(__name__)

DEFAULT_SUBJECT_PREFIX = "「PX」"
DEFAULT_SENDER_NAME = "Monitor"


@dataclass
class EmailNotifier:
    """Composes change or steady-failure reports and hands them to a mail transport.

    A notifier without a transport is the unconfigured state: every call is
    logged and skipped.
    """

    transport: Optional[MailTransport]
    sender: str = ""
    recipients: List[str] = field(default_factory=list)
    language: str = "zh"
    subject_prefix: str = DEFAULT_SUBJECT_PREFIX
    sender_name: str = DEFAULT_SENDER_NAME

    @property
    def labels(self) -> Labels:
        return LABELS.get(self.language, LABELS["zh"])

    def resolved_recipients(self) -> List[str]:
        recipients = [r.strip() for r in self.recipients if r.strip()]
        if recipients:
            return recipients
        return [self.sender] if self.sender else []

    def compose(
        self,
        transitions: Mapping[ProxyEndpoint, bool],
        availability: Mapping[ProxyEndpoint, bool],
    ) -> Optional[NotificationMessage]:
        labels = self.labels
        if transitions:
            subject = labels.changed_subject
            lines = [f"{endpoint} {labels.describe(available)}" for endpoint, available in transitions.items()]
        else:
            down = [endpoint for endpoint, available in availability.items() if not available]
            if not down:
                return None
            subject = labels.persists_subject
            lines = [f"{endpoint} {labels.describe(False)}" for endpoint in down]
        return NotificationMessage(
            sender_name=self.sender_name,
            sender=self.sender,
            recipients=self.resolved_recipients(),
            subject=f"{self.subject_prefix}{subject}",
            lines=lines,
        )

    def notify(
        self,
        transitions: Mapping[ProxyEndpoint, bool],
        availability: Mapping[ProxyEndpoint, bool],
    ) -> NotifyOutcome:
        logger.info("sending notification...")
        if self.transport is None:
            logger.info("send notification skip. smtp addr is empty.")
            return NotifyOutcome.SKIPPED

        message = self.compose(transitions, availability)
        if message is None:
            logger.info("send notification skip. nothing to report.")
            return NotifyOutcome.SKIPPED
        if not message.recipients:
            logger.error("send notification fail. err='no recipients configured'")
            return NotifyOutcome.FAILED

        try:
            self.transport.send(message)
        except (ConfigurationError, NotificationDispatchError) as exc:
            logger.error("send notification fail. err='%s'", exc)
            return NotifyOutcome.FAILED
        logger.info("send notification success. recipients=%s", ",".join(message.recipients))
        return NotifyOutcome.SENT
