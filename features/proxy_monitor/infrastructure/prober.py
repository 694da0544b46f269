from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict

import requests

from features.proxy_monitor.application.ports import ProxyProber
from features.proxy_monitor.domain.errors import ConfigurationError, TransientNetworkError
from features.proxy_monitor.domain.models import ProbeResult, ProxyEndpoint, validate_endpoint

from .settings import DEFAULT_PROBE_TIMEOUT, DEFAULT_PROBE_URL


logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 10.0


@dataclass
class RequestsProxyProber(ProxyProber):
    """Fetches an IP echo URL through the proxy; a 200 proves the proxy forwards traffic."""

    test_url: str = DEFAULT_PROBE_URL
    timeout: float = DEFAULT_PROBE_TIMEOUT
    max_attempts: int = MAX_ATTEMPTS
    retry_delay: float = RETRY_DELAY_SECONDS
    session: requests.Session = field(default_factory=requests.Session)
    sleep: Callable[[float], None] = time.sleep

    def probe(self, endpoint: ProxyEndpoint) -> ProbeResult:
        try:
            validate_endpoint(endpoint)
        except ConfigurationError as exc:
            logger.error("test proxy %s skipped. err='%s'", endpoint, exc)
            return ProbeResult(endpoint=endpoint, ok=False, attempts=1, error=str(exc))

        attempts = max(1, self.max_attempts)
        error = ""
        for attempt in range(1, attempts + 1):
            try:
                body = self._attempt(endpoint)
            except TransientNetworkError as exc:
                error = str(exc)
                if attempt < attempts:
                    logger.warning(
                        "test proxy %s fail. will retry(%d) after %gs later. err='%s'",
                        endpoint,
                        attempt,
                        self.retry_delay,
                        error,
                    )
                    self.sleep(self.retry_delay)
                else:
                    logger.warning("test proxy %s fail after %d attempts. err='%s'", endpoint, attempt, error)
                continue
            return ProbeResult(endpoint=endpoint, ok=True, attempts=attempt, body=body)
        return ProbeResult(endpoint=endpoint, ok=False, attempts=attempts, error=error)

    def _attempt(self, endpoint: ProxyEndpoint) -> str:
        proxies: Dict[str, str] = {
            "http": endpoint,
            "https": endpoint,
        }
        try:
            response = self.session.get(self.test_url, proxies=proxies, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransientNetworkError(str(exc)) from exc
        if response.status_code != 200:
            raise TransientNetworkError(f"status code: {response.status_code}")
        return response.text.strip()
