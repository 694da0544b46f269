from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass
from typing import Tuple

from features.proxy_monitor.application.ports import MailTransport
from features.proxy_monitor.domain.errors import ConfigurationError, NotificationDispatchError
from features.proxy_monitor.domain.notification import NotificationMessage


logger = logging.getLogger(__name__)

SMTP_TIMEOUT_SECONDS = 30
IMPLICIT_TLS_PORT = 465


def split_host_port(addr: str) -> Tuple[str, int]:
    host, sep, port_s = addr.strip().rpartition(":")
    if not sep or not host or not port_s:
        raise ConfigurationError(f"mail relay address {addr!r} must be host:port")
    host = host.strip("[]")
    try:
        port = int(port_s)
    except ValueError as exc:
        raise ConfigurationError(f"mail relay address {addr!r} has an invalid port") from exc
    if not 0 < port < 65536:
        raise ConfigurationError(f"mail relay address {addr!r} has an invalid port")
    return host, port


@dataclass
class SmtpMailTransport(MailTransport):
    """Authenticated submission to a single relay; STARTTLS is used whenever offered."""

    addr: str
    username: str = ""
    password: str = ""
    timeout: float = SMTP_TIMEOUT_SECONDS

    def send(self, message: NotificationMessage) -> None:
        host, port = split_host_port(self.addr)
        payload = message.render().encode("utf-8")
        try:
            with self._connect(host, port) as client:
                client.ehlo()
                if port != IMPLICIT_TLS_PORT and client.has_extn("starttls"):
                    client.starttls(context=ssl.create_default_context())
                    client.ehlo()
                if self.username:
                    client.login(self.username, self.password)
                refused = client.sendmail(message.sender, message.recipients, payload)
        except smtplib.SMTPAuthenticationError as exc:
            raise NotificationDispatchError(f"smtp authentication rejected: {exc}") from exc
        except (smtplib.SMTPException, OSError, UnicodeError) as exc:
            raise NotificationDispatchError(f"smtp submission via {host}:{port} failed: {exc}") from exc
        if refused:
            logger.warning("smtp relay refused recipients: %s", ",".join(sorted(refused)))

    def _connect(self, host: str, port: int) -> smtplib.SMTP:
        if port == IMPLICIT_TLS_PORT:
            return smtplib.SMTP_SSL(host, port, timeout=self.timeout, context=ssl.create_default_context())
        return smtplib.SMTP(host, port, timeout=self.timeout)
