from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from argos import __version__
from argos.api.deps import get_engine
from argos.api.problems import problem_response, register_error_handlers
from argos.api.rate_limit import RateLimiter
from argos.api.routes_counts import router as counts_router
from argos.api.routes_data_records import router as data_records_router
from argos.api.routes_inference import router as inference_router
from argos.config.settings import settings
from argos.db.engine import ping_db
from argos.observability import setup_logging

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("argos.access")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_format)
    app.state.shutting_down = False
    logger.info("argos api starting", extra={"machine_id": settings.machine_id})
    try:
        yield
    finally:
        app.state.shutting_down = True
        engine = getattr(app.state, "engine", None)
        if engine is not None:
            engine.dispose()
        logger.info("argos api stopped")


app = FastAPI(title="Argos API", version=__version__, lifespan=lifespan)
app.state.shutting_down = False
app.state.rate_limiter = RateLimiter(limit=settings.rate_limit_max, window_s=settings.rate_limit_window_s)

cors_env = os.getenv("CORS_ORIGINS", settings.cors_origins)
cors_origins = [o.strip() for o in cors_env.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(inference_router, prefix="/v1")
app.include_router(counts_router, prefix="/v1")
app.include_router(data_records_router, prefix="/v1")


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    limiter: RateLimiter = request.app.state.rate_limiter
    client_ip = request.client.host if request.client else "unknown"
    if not limiter.allow(client_ip):
        logger.warning("rate limit exceeded", extra={"path": request.url.path})
        return problem_response(
            429,
            "Too Many Requests",
            "Too many requests, please try again later.",
            headers={
                "Retry-After": str(limiter.window_s),
                "X-RateLimit-Limit": str(limiter.limit),
                "X-RateLimit-Remaining": "0",
            },
        )
    response = await call_next(request)
    response.headers["X-RateLimit-Limit"] = str(limiter.limit)
    response.headers["X-RateLimit-Remaining"] = str(limiter.remaining(client_ip))
    return response


@app.middleware("http")
async def no_store_middleware(request: Request, call_next):
    response = await call_next(request)
    if request.method == "GET":
        response.headers["Cache-Control"] = "no-store"
    return response


@app.middleware("http")
async def access_log_middleware(request: Request, call_next):
    # Registered last, so it wraps 429 and 500 responses. Headers and bodies are not logged.
    start = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        return response
    finally:
        access_logger.info(
            f"{request.method} {request.url.path} {status}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                "client": request.client.host if request.client else None,
            },
        )


@app.get("/health")
def health(engine: Engine = Depends(get_engine)) -> dict:
    db = ping_db(engine)
    return {
        "status": "ok" if db.ok else "degraded",
        "db": {"ok": db.ok, "detail": db.detail},
    }


@app.get("/ready")
def ready(request: Request):
    if getattr(request.app.state, "shutting_down", False):
        return problem_response(503, "Service Unavailable", "Shutting down")
    return {"status": "ready"}
