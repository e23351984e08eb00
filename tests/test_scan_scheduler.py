from datetime import timedelta
from typing import List

import pytest

from features.endpoint_scanner.application.scan_scheduler import ScanScheduler, SchedulerState
from features.endpoint_scanner.application.selector import EndpointSelector
from features.endpoint_scanner.domain.errors import ProbeInvocationError
from features.endpoint_scanner.domain.models import (
    EndpointAddress,
    HostPerformance,
    PeriodSpec,
    PeriodUnit,
    PortState,
    ScannerConfig,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class TimedProbe:
    """Returns fixed latencies and advances the fake clock to simulate probe time."""

    def __init__(self, clock: FakeClock, cost: float = 0.0):
        self._clock = clock
        self._cost = cost
        self.calls: List[EndpointAddress] = []

    def probe(self, endpoint: EndpointAddress) -> HostPerformance:
        self.calls.append(endpoint)
        self._clock.now += self._cost
        return HostPerformance(latency_micros=100 * len(self.calls), state=PortState.OPEN)


class RecordingReporter:
    def __init__(self):
        self.events: List[str] = []

    def cycle_started(self) -> None:
        self.events.append("start")

    def best_endpoint(self, result) -> None:
        self.events.append(f"best {result.best}")


ENDPOINT = EndpointAddress("upstream.example", "443")


def _build(clock: FakeClock, cost: float = 0.0):
    probe = TimedProbe(clock, cost)
    reporter = RecordingReporter()
    scheduler = ScanScheduler(
        selector=EndpointSelector(probe=probe),
        reporter=reporter,
        clock=clock,
        sleep=clock.sleep,
    )
    return scheduler, probe, reporter


def _config(endpoints, unit=PeriodUnit.SECONDS, count=60) -> ScannerConfig:
    return ScannerConfig(endpoints=list(endpoints), period=PeriodSpec(unit=unit, count=count))


def test_initial_pass_runs_before_first_wait():
    clock = FakeClock()
    scheduler, probe, reporter = _build(clock)
    scheduler.run(_config([ENDPOINT]), max_cycles=1)
    assert clock.sleeps == []
    assert probe.calls == [ENDPOINT]
    assert reporter.events == ["start", "best upstream.example:443"]
    assert scheduler.last_result.best == ENDPOINT
    assert scheduler.state is SchedulerState.STOPPED


def test_repeats_every_interval():
    clock = FakeClock()
    scheduler, probe, reporter = _build(clock)
    scheduler.run(_config([ENDPOINT], PeriodUnit.MINUTES, 1), max_cycles=3)
    assert clock.sleeps == [60, 60]
    assert len(probe.calls) == 3
    assert reporter.events.count("start") == 3


def test_interval_scales_with_count():
    assert PeriodSpec(PeriodUnit.HOURS, 2).interval == timedelta(hours=2)
    assert PeriodSpec(PeriodUnit.HOURS, 1).interval * 2 == PeriodSpec(PeriodUnit.HOURS, 2).interval
    assert PeriodSpec(PeriodUnit.DAYS, 1).interval == timedelta(days=1)
    assert PeriodSpec(PeriodUnit.MINUTES, 3).interval == timedelta(minutes=3)
    assert PeriodSpec(PeriodUnit.SECONDS, 45).interval == timedelta(seconds=45)

    clock = FakeClock()
    scheduler, _, _ = _build(clock)
    scheduler.run(_config([ENDPOINT], PeriodUnit.HOURS, 2), max_cycles=2)
    assert clock.sleeps == [7200]


def test_period_must_be_positive():
    with pytest.raises(ValueError):
        PeriodSpec(PeriodUnit.SECONDS, 0)


def test_overrunning_pass_skips_missed_ticks():
    clock = FakeClock()
    scheduler, probe, _ = _build(clock, cost=25)
    scheduler.run(_config([ENDPOINT], PeriodUnit.SECONDS, 10), max_cycles=3)
    # initial pass ends at 25, first tick at 35; the pass ending at 60
    # overran the ticks at 45 and 55, so the next pass waits for 65
    assert clock.sleeps == [10, 5]
    assert len(probe.calls) == 3


def test_empty_endpoint_list_keeps_scheduling():
    clock = FakeClock()
    scheduler, probe, reporter = _build(clock)
    scheduler.run(_config([]), max_cycles=3)
    assert reporter.events == ["start", "start", "start"]
    assert scheduler.last_result is None
    assert scheduler.cycles == 3
    assert probe.calls == []


def test_stop_ends_the_loop_after_waiting():
    clock = FakeClock()
    scheduler, probe, _ = _build(clock)

    def _sleep_then_stop(seconds: float) -> None:
        clock.sleep(seconds)
        scheduler.stop()

    scheduler.sleep = _sleep_then_stop
    scheduler.run(_config([ENDPOINT]))
    assert len(probe.calls) == 1
    assert scheduler.state is SchedulerState.STOPPED


def test_run_cycle_reports_without_waiting():
    clock = FakeClock()
    scheduler, _, reporter = _build(clock)
    result = scheduler.run_cycle([ENDPOINT])
    assert result is not None and result.best == ENDPOINT
    assert scheduler.run_cycle([]) is None
    assert scheduler.last_result is result
    assert reporter.events == ["start", "best upstream.example:443", "start"]
    assert scheduler.state is SchedulerState.IDLE


class FlakyProbe:
    """Fails every endpoint in the first cycle, then answers normally."""

    def __init__(self):
        self.calls = 0

    def probe(self, endpoint: EndpointAddress) -> HostPerformance:
        self.calls += 1
        if self.calls == 1:
            raise ProbeInvocationError(endpoint, "nmap output unreadable")
        return HostPerformance(latency_micros=777, state=PortState.OPEN)


def test_failed_cycle_does_not_affect_the_next():
    clock = FakeClock()
    reporter = RecordingReporter()
    scheduler = ScanScheduler(
        selector=EndpointSelector(probe=FlakyProbe()),
        reporter=reporter,
        clock=clock,
        sleep=clock.sleep,
    )
    scheduler.run(_config([ENDPOINT]), max_cycles=2)

    assert scheduler.cycles == 2
    assert clock.sleeps == [60]
    assert reporter.events == ["start", "start", "best upstream.example:443"]
    assert scheduler.last_result.best == ENDPOINT
    assert scheduler.last_result.score == 777
    assert scheduler.last_result.failures == {}
