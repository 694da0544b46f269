from __future__ import annotations


class ProxyMonitorError(Exception):
    """Base class for proxy monitor failures."""


class ConfigurationError(ProxyMonitorError):
    """Raised for malformed endpoints or relay addresses. Never retried."""


class TransientNetworkError(ProxyMonitorError):
    """Raised when a probe attempt times out, cannot connect, or gets a non-200 status."""


class NotificationDispatchError(ProxyMonitorError):
    """Raised when the mail relay is unreachable or rejects authentication or submission."""
