import pytest
import requests

from features.proxy_monitor.infrastructure.prober import RequestsProxyProber


class FakeResponse:
    def __init__(self, status_code, text="203.0.113.7\n"):
        self.status_code = status_code
        self.text = text


class FakeSession:
    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.calls = []

    def get(self, url, proxies=None, timeout=None):
        self.calls.append((url, proxies, timeout))
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _prober(session, sleeps):
    return RequestsProxyProber(
        test_url="https://ifconfig.me/ip",
        timeout=7,
        session=session,
        sleep=sleeps.append,
    )


def test_probe_success_first_attempt_routes_through_proxy():
    session = FakeSession([FakeResponse(200)])
    sleeps = []
    result = _prober(session, sleeps).probe("socks5://127.0.0.1:1082")

    assert result.ok
    assert result.attempts == 1
    assert result.body == "203.0.113.7"
    assert sleeps == []
    url, proxies, timeout = session.calls[0]
    assert url == "https://ifconfig.me/ip"
    assert proxies == {"http": "socks5://127.0.0.1:1082", "https": "socks5://127.0.0.1:1082"}
    assert timeout == 7


def test_probe_always_failing_makes_three_attempts_with_delay_between():
    session = FakeSession([requests.ConnectionError("refused")] * 3)
    sleeps = []
    result = _prober(session, sleeps).probe("socks5://127.0.0.1:1083")

    assert not result.ok
    assert result.attempts == 3
    assert len(session.calls) == 3
    assert sleeps == [10.0, 10.0]
    assert "refused" in result.error


def test_probe_recovers_after_retry():
    session = FakeSession([requests.Timeout("timed out"), FakeResponse(200)])
    sleeps = []
    result = _prober(session, sleeps).probe("http://10.0.0.1:3128")

    assert result.ok
    assert result.attempts == 2
    assert sleeps == [10.0]


def test_non_200_status_is_retried_then_fails():
    session = FakeSession([FakeResponse(502), FakeResponse(403), FakeResponse(500)])
    sleeps = []
    result = _prober(session, sleeps).probe("socks5h://proxy.internal:1080")

    assert not result.ok
    assert result.attempts == 3
    assert result.error == "status code: 500"


@pytest.mark.parametrize(
    "endpoint",
    ["not a url", "ftp://127.0.0.1:21", "socks5://127.0.0.1", "socks5://:1080", "socks5://127.0.0.1:99999"],
)
def test_malformed_endpoint_fails_immediately_without_retry(endpoint):
    session = FakeSession([])
    sleeps = []
    result = _prober(session, sleeps).probe(endpoint)

    assert not result.ok
    assert result.attempts == 1
    assert session.calls == []
    assert sleeps == []
