from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Dict, Final, List, Optional


MICROSECONDS_IN_SECOND: Final[int] = 1_000_000


class PortState(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    FILTERED = "filtered"
    UNAVAILABLE = "unavailable"


class PeriodUnit(str, Enum):
    SECONDS = "SECONDS"
    MINUTES = "MINUTES"
    HOURS = "HOURS"
    DAYS = "DAYS"

    @property
    def seconds(self) -> int:
        return _UNIT_SECONDS[self]


_UNIT_SECONDS: Dict[PeriodUnit, int] = {
    PeriodUnit.SECONDS: 1,
    PeriodUnit.MINUTES: 60,
    PeriodUnit.HOURS: 60 * 60,
    PeriodUnit.DAYS: 24 * 60 * 60,
}


@dataclass(frozen=True)
class EndpointAddress:
    host: str
    port: str

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class HostPerformance:
    latency_micros: int
    state: PortState

    def __post_init__(self):
        if self.latency_micros < 0:
            raise ValueError(f"latency must be non-negative, got {self.latency_micros}")


# Invalid host is like 100 seconds of latency.
UNREACHABLE_PERFORMANCE: Final[HostPerformance] = HostPerformance(
    latency_micros=100 * MICROSECONDS_IN_SECOND,
    state=PortState.CLOSED,
)


@dataclass(frozen=True)
class PeriodSpec:
    unit: PeriodUnit
    count: int

    def __post_init__(self):
        if self.count <= 0:
            raise ValueError(f"period must be positive, got {self.count}")

    @property
    def interval(self) -> timedelta:
        return timedelta(seconds=self.unit.seconds * self.count)


@dataclass(frozen=True)
class ScannerConfig:
    endpoints: List[EndpointAddress]
    period: PeriodSpec


@dataclass
class SelectionResult:
    """Outcome of one selection cycle."""

    best: EndpointAddress
    score: int
    scores: Dict[EndpointAddress, int] = field(default_factory=dict)
    failures: Dict[EndpointAddress, str] = field(default_factory=dict)
    completed_at: Optional[float] = None
