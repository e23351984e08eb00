from __future__ import annotations

import sys
from typing import Optional, TextIO

from features.endpoint_scanner.application.ports import ProbeReporter, SelectionReporter
from features.endpoint_scanner.domain.models import (
    EndpointAddress,
    HostPerformance,
    PortState,
    SelectionResult,
)


def format_probe_line(endpoint: EndpointAddress, performance: HostPerformance, reachable: bool = True) -> str:
    status = performance.state.value if reachable else PortState.UNAVAILABLE.value
    return f"Endpoint: {endpoint} Latency(in us): {performance.latency_micros} Status: {status}"


def format_best_line(endpoint: EndpointAddress) -> str:
    return f"The best endpoint is {endpoint}"


class ConsoleReporter(ProbeReporter, SelectionReporter):
    """Writes the operator-facing scan report to stdout."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def probe_result(self, endpoint: EndpointAddress, performance: HostPerformance, reachable: bool) -> None:
        self._emit(format_probe_line(endpoint, performance, reachable))

    def cycle_started(self) -> None:
        self._emit("Start scanning of endpoints.")

    def best_endpoint(self, result: SelectionResult) -> None:
        self._emit(format_best_line(result.best))

    def _emit(self, line: str) -> None:
        print(line, file=self._stream or sys.stdout, flush=True)
