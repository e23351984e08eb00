from fastapi import FastAPI
from features.endpoint_scanner.interface.api import router as scanner_router
from features.endpoint_scanner.application import services
from features.endpoint_scanner.infrastructure.scan_scheduler import build_scheduler, configure_logging

app = FastAPI(title="endpoint-scanner API", version="0.1.0")

@app.on_event("startup")
def _startup():
    if getattr(app.state, "scanner", None) is None:
        configure_logging()
        app.state.scanner = services.start_scanner(build_scheduler)

@app.on_event("shutdown")
def _shutdown():
    runtime = getattr(app.state, "scanner", None)
    if runtime is not None:
        runtime.stop(timeout=5)

@app.get("/healthz")
def healthz():
    return {"status": "ok"}

app.include_router(scanner_router, prefix="/api")
