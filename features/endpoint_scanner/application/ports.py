from __future__ import annotations

from typing import Callable, Protocol

from features.endpoint_scanner.domain.models import (
    EndpointAddress,
    HostPerformance,
    ScannerConfig,
    SelectionResult,
)


class EndpointProbe(Protocol):
    def probe(self, endpoint: EndpointAddress) -> HostPerformance:
        """Measure reachability and latency of a single endpoint.

        Raises ProbeInvocationError when the probe itself cannot be run.
        """


class ConfigSource(Protocol):
    def load(self) -> ScannerConfig:
        """Return parsed endpoints and period, raising ConfigError on failure."""


class ProbeReporter(Protocol):
    def probe_result(self, endpoint: EndpointAddress, performance: HostPerformance, reachable: bool) -> None:
        """Report the measurement taken for one endpoint."""


class SelectionReporter(Protocol):
    def cycle_started(self) -> None:
        """Announce the start of a selection cycle."""

    def best_endpoint(self, result: SelectionResult) -> None:
        """Report the endpoint chosen in a selection cycle."""


Clock = Callable[[], float]
Sleeper = Callable[[float], None]
