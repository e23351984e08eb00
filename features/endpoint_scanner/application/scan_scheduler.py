from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from features.endpoint_scanner.application.ports import Clock, SelectionReporter, Sleeper
from features.endpoint_scanner.application.selector import EndpointSelector
from features.endpoint_scanner.domain.errors import NoEndpointAvailable
from features.endpoint_scanner.domain.models import EndpointAddress, ScannerConfig, SelectionResult


logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    WAITING = "waiting"
    STOPPED = "stopped"


@dataclass
class ScanScheduler:
    """Runs a selection pass at startup, then once per configured period.

    Passes never overlap. When a pass outlives one or more ticks those ticks
    are dropped and the next pass waits for the following tick boundary.
    """

    selector: EndpointSelector
    reporter: SelectionReporter
    clock: Clock = time.monotonic
    sleep: Optional[Sleeper] = None
    _stop_event: threading.Event = field(init=False, default_factory=threading.Event)
    _state: SchedulerState = field(init=False, default=SchedulerState.IDLE)
    _last_result: Optional[SelectionResult] = field(init=False, default=None)
    _cycles: int = field(init=False, default=0)

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def last_result(self) -> Optional[SelectionResult]:
        return self._last_result

    @property
    def cycles(self) -> int:
        return self._cycles

    def run(self, config: ScannerConfig, max_cycles: Optional[int] = None) -> None:
        interval = config.period.interval.total_seconds()
        endpoints = list(config.endpoints)

        # Initial pass, for someone who can't wait for the first tick.
        self.run_cycle(endpoints)
        next_tick = self.clock() + interval
        logger.info("Scanning %d endpoint(s) every %ss", len(endpoints), int(interval))

        try:
            while not self._should_finish(max_cycles):
                self._state = SchedulerState.WAITING
                if self._wait_until(next_tick):
                    break
                self.run_cycle(endpoints)
                next_tick = self._following_tick(next_tick, interval)
        finally:
            self._state = SchedulerState.STOPPED

    def run_cycle(self, endpoints: Sequence[EndpointAddress]) -> Optional[SelectionResult]:
        previous = self._state
        self._state = SchedulerState.RUNNING
        self._cycles += 1
        try:
            self.reporter.cycle_started()
            try:
                result = self.selector.select(endpoints)
            except NoEndpointAvailable as exc:
                logger.warning("Selection cycle %d produced no endpoint: %s", self._cycles, exc)
                return None
            self._last_result = result
            self.reporter.best_endpoint(result)
            return result
        finally:
            self._state = previous

    def stop(self) -> None:
        self._stop_event.set()

    def _should_finish(self, max_cycles: Optional[int]) -> bool:
        if self._stop_event.is_set():
            return True
        return max_cycles is not None and self._cycles >= max_cycles

    def _wait_until(self, deadline: float) -> bool:
        delay = deadline - self.clock()
        if delay > 0:
            if self.sleep is not None:
                self.sleep(delay)
            else:
                self._stop_event.wait(delay)
        return self._stop_event.is_set()

    def _following_tick(self, tick: float, interval: float) -> float:
        candidate = tick + interval
        now = self.clock()
        if now <= candidate:
            return candidate
        missed = int((now - candidate) // interval) + 1
        logger.warning("Selection pass overran the period; skipping %d tick(s)", missed)
        return candidate + missed * interval
