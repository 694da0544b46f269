from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

from features.proxy_monitor.domain.models import (
    AvailabilityState,
    ProxyEndpoint,
    TrackerUpdate,
    TransitionSet,
)


class AvailabilityTracker:
    """Owns the in-memory availability map and derives per-cycle transitions."""

    def __init__(self, endpoints: Iterable[ProxyEndpoint]) -> None:
        self._endpoints: List[ProxyEndpoint] = []
        for endpoint in endpoints:
            endpoint = endpoint.strip()
            if endpoint and endpoint not in self._endpoints:
                self._endpoints.append(endpoint)
        # Optimistic start: everything is assumed reachable until a probe says otherwise.
        self._state: Dict[ProxyEndpoint, bool] = {endpoint: True for endpoint in self._endpoints}

    @property
    def endpoints(self) -> List[ProxyEndpoint]:
        return list(self._endpoints)

    def snapshot(self) -> AvailabilityState:
        return dict(self._state)

    def apply(self, outcomes: Mapping[ProxyEndpoint, bool]) -> TrackerUpdate:
        transitions: TransitionSet = {}
        for endpoint in self._endpoints:
            if endpoint not in outcomes:
                continue
            available = bool(outcomes[endpoint])
            if self._state[endpoint] != available:
                self._state[endpoint] = available
                transitions[endpoint] = available
        unavailable = [endpoint for endpoint in self._endpoints if not self._state[endpoint]]
        return TrackerUpdate(transitions=transitions, unavailable=unavailable)
