from __future__ import annotations

from typing import Final

from .models import MICROSECONDS_IN_SECOND, HostPerformance, PortState


# Not open port is like 10 seconds of latency.
NOT_OPEN_PENALTY: Final[int] = 10 * MICROSECONDS_IN_SECOND


def heuristic(performance: HostPerformance) -> int:
    """Lower is better. The unreachable sentinel stacks with the penalty (110s)."""
    penalty = 0 if performance.state is PortState.OPEN else NOT_OPEN_PENALTY
    return performance.latency_micros + penalty
