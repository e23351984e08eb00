from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from ..application.services import ScannerRuntime


router = APIRouter()


class EndpointOut(BaseModel):
    host: str
    port: str


class BestEndpointOut(BaseModel):
    endpoint: EndpointOut
    score: int
    scores: Dict[str, int]
    failures: Dict[str, str]
    completed_at: Optional[datetime]
    scheduler_state: str
    cycles: int


def _runtime(request: Request) -> ScannerRuntime:
    runtime = getattr(request.app.state, "scanner", None)
    if runtime is None:
        raise HTTPException(status_code=503, detail="Scanner not running")
    return runtime


@router.get("/endpoints", response_model=List[EndpointOut])
def list_endpoints(request: Request):
    runtime = _runtime(request)
    return [EndpointOut(host=e.host, port=e.port) for e in runtime.endpoints]


@router.get("/endpoints/best", response_model=BestEndpointOut)
def best_endpoint(request: Request):
    runtime = _runtime(request)
    result = runtime.best()
    if result is None:
        raise HTTPException(status_code=503, detail="No endpoint available")
    completed_at = None
    if result.completed_at is not None:
        completed_at = datetime.fromtimestamp(result.completed_at, tz=timezone.utc)
    return BestEndpointOut(
        endpoint=EndpointOut(host=result.best.host, port=result.best.port),
        score=result.score,
        scores={str(e): s for e, s in result.scores.items()},
        failures={str(e): reason for e, reason in result.failures.items()},
        completed_at=completed_at,
        scheduler_state=runtime.state.value,
        cycles=runtime.scheduler.cycles,
    )
