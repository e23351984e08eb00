from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence

from features.endpoint_scanner.application.ports import EndpointProbe
from features.endpoint_scanner.domain.errors import NoEndpointAvailable, ProbeInvocationError
from features.endpoint_scanner.domain.models import EndpointAddress, HostPerformance, SelectionResult
from features.endpoint_scanner.domain.scoring import heuristic


logger = logging.getLogger(__name__)


@dataclass
class EndpointSelector:
    """Probes endpoints one after another and picks the lowest score."""

    probe: EndpointProbe
    scorer: Callable[[HostPerformance], int] = heuristic

    def select(self, endpoints: Sequence[EndpointAddress]) -> SelectionResult:
        if not endpoints:
            raise NoEndpointAvailable()

        best: Optional[EndpointAddress] = None
        best_score: Optional[int] = None
        scores: Dict[EndpointAddress, int] = {}
        failures: Dict[EndpointAddress, str] = {}

        for endpoint in endpoints:
            try:
                performance = self.probe.probe(endpoint)
            except ProbeInvocationError as exc:
                logger.warning("Skipping %s: %s", endpoint, exc.reason)
                failures[endpoint] = exc.reason
                continue
            score = self.scorer(performance)
            scores[endpoint] = score
            # strict comparison keeps the first of equal scores
            if best_score is None or score < best_score:
                best = endpoint
                best_score = score

        if best is None or best_score is None:
            raise NoEndpointAvailable(
                f"No endpoint could be probed ({len(failures)} failed)",
                failures=failures,
            )
        return SelectionResult(
            best=best,
            score=best_score,
            scores=scores,
            failures=failures,
            completed_at=time.time(),
        )
