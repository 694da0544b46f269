from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from urllib.parse import urlsplit

from .errors import ConfigurationError


SUPPORTED_SCHEMES = ("http", "https", "socks4", "socks4a", "socks5", "socks5h")

ProxyEndpoint = str
AvailabilityState = Dict[ProxyEndpoint, bool]
TransitionSet = Dict[ProxyEndpoint, bool]


def validate_endpoint(endpoint: ProxyEndpoint) -> tuple[str, str, int]:
    """Split ``scheme://host:port`` and raise ConfigurationError if any part is unusable."""

    try:
        parts = urlsplit(endpoint.strip())
        port = parts.port
    except ValueError as exc:
        raise ConfigurationError(f"malformed proxy endpoint {endpoint!r}: {exc}") from exc
    if parts.scheme.lower() not in SUPPORTED_SCHEMES:
        raise ConfigurationError(f"unsupported proxy scheme in {endpoint!r}")
    if not parts.hostname:
        raise ConfigurationError(f"proxy endpoint {endpoint!r} has no host")
    if port is None:
        raise ConfigurationError(f"proxy endpoint {endpoint!r} has no port")
    return parts.scheme.lower(), parts.hostname, port


@dataclass(frozen=True)
class ProbeResult:
    endpoint: ProxyEndpoint
    ok: bool
    attempts: int
    error: Optional[str] = None
    body: Optional[str] = None


class NotifyOutcome(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class TrackerUpdate:
    transitions: TransitionSet
    unavailable: List[ProxyEndpoint]

    @property
    def any_unavailable(self) -> bool:
        return bool(self.unavailable)


@dataclass
class CycleReport:
    started_at: datetime
    transitions: TransitionSet
    availability: AvailabilityState
    still_unavailable: List[ProxyEndpoint] = field(default_factory=list)
    notification: Optional[NotifyOutcome] = None
    duration_seconds: float = 0.0
