# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Matrix Member Badge Service
===========================
Answers "how many members have joined this Matrix room right now?" for any
homeserver, without pre-registered credentials:

    SRV discovery ─► guest registration ─► room state ─► count joins

Results are cached for CACHE_TTL_SECONDS per (host, room).

Port: 8080
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from matrix_badge.controllers import badge_controller, system_controller
from matrix_badge.core.config import settings
from matrix_badge.core.dependencies import close_http_client, init_http_client
from matrix_badge.core.errors import MatrixBadgeError
from matrix_badge.core.logging import configure_logging, get_logger
from matrix_badge.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger(settings.SERVICE_NAME)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Open the shared outbound HTTP client; close it on shutdown."""
    configure_logging()
    init_http_client()
    logger.info("%s v%s started", settings.SERVICE_NAME, settings.SERVICE_VERSION)
    yield
    await close_http_client()
    logger.info("HTTP client closed — shutting down")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Matrix Member Badge Service",
    description="Counts joined members of public Matrix rooms and renders them as badges.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


# ── Exception handlers ────────────────────────────────────────────────────
@app.exception_handler(MatrixBadgeError)
async def matrix_error_handler(request: Request, exc: MatrixBadgeError):
    req_id = getattr(request.state, "request_id", None)
    logger.warning(
        "Member count failed: %s", exc,
        extra={"request_id": req_id, "kind": exc.kind.value},
    )
    return JSONResponse(
        status_code=exc.http_status,
        content={"detail": exc.message, "kind": exc.kind.value, "request_id": req_id},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    req_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"request_id": req_id})
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
    )


app.include_router(system_controller.router)
app.include_router(badge_controller.router)


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
