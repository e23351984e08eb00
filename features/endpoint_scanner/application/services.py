from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from ..domain.models import EndpointAddress, ScannerConfig, SelectionResult
from .scan_scheduler import ScanScheduler, SchedulerState


SchedulerFactory = Callable[[], Tuple[ScanScheduler, ScannerConfig]]


@dataclass
class ScannerRuntime:
    """Keeps one scheduler running on a background thread for read-only consumers."""

    scheduler: ScanScheduler
    config: ScannerConfig
    _thread: Optional[threading.Thread] = field(init=False, default=None)

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self.scheduler.run,
            args=(self.config,),
            name="endpoint-scanner",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self.scheduler.stop()
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def endpoints(self) -> List[EndpointAddress]:
        return list(self.config.endpoints)

    @property
    def state(self) -> SchedulerState:
        return self.scheduler.state

    def best(self) -> Optional[SelectionResult]:
        return self.scheduler.last_result


def start_scanner(factory: SchedulerFactory) -> ScannerRuntime:
    scheduler, config = factory()
    runtime = ScannerRuntime(scheduler=scheduler, config=config)
    runtime.start()
    return runtime
