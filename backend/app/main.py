"""FastAPI application for the cleaning service request/quote/bill ledger."""

import logging
import os
import time
from datetime import datetime

from fastapi import FastAPI, Request, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError, TimeoutError as SA_TimeoutError
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import models  # noqa: F401  registers tables on Base.metadata
from .api import api_bill, api_dashboard, api_request, auth
from .core.config import settings
from .core.observability import setup_logging, setup_tracer
from .database import Base, engine
from .middleware.security_headers import SecurityHeadersMiddleware
from .services.admin_bootstrap import ensure_default_admin
from .utils.errors import error_body
from .utils.status_logger import register_status_listeners

# Configure logging before creating any loggers
setup_logging()
logger = logging.getLogger(__name__)

_BOOT_TS = time.time()

register_status_listeners()

_bootstrap_started_at = datetime.utcnow()
try:
    Base.metadata.create_all(bind=engine)
except SQLAlchemyError as _exc:
    logger.warning("Table bootstrap skipped: %s", _exc)

ensure_default_admin()

logger.info(
    "startup.bootstrap.end duration_ms=%s pid=%s",
    int((datetime.utcnow() - _bootstrap_started_at).total_seconds() * 1000),
    os.getpid(),
)

# Always use ORJSONResponse for JSON payloads to ensure consistent, fast
# serialization across all endpoints.
app = FastAPI(title="Cleaning Service API", default_response_class=ORJSONResponse)
setup_tracer(app)

# Uploaded request photos are served back under /uploads/<file_path>
os.makedirs(settings.UPLOADS_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")

if settings.CORS_ALLOW_ALL:
    # Wildcard origins cannot be combined with credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.rstrip("/") for o in settings.CORS_ORIGINS if o],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
logger.info("CORS origins set to: %s", "*" if settings.CORS_ALLOW_ALL else settings.CORS_ORIGINS)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1024)


@app.middleware("http")
async def catch_exceptions(request: Request, call_next):
    """Turn anything that escapes the routes into a JSON error body."""
    try:
        return await call_next(request)
    except SA_TimeoutError as exc:  # DB pool timeout -> 503 to reduce retry storms
        logger.error("DB timeout at %s: %s", request.url.path, str(exc))
        return ORJSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "Database busy, please retry"},
        )
    except Exception as exc:  # pragma: no cover - generic handler
        logger.exception("Unhandled error at %s: %s", request.url.path, exc)
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(
            "HTTP error %s at %s: %s", exc.status_code, request.url.path, exc.detail
        )
    return ORJSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed or missing input as a 400 with per-field messages."""
    errors = exc.errors()
    logger.warning("Validation error at %s: %s", request.url.path, errors)

    field_errors = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "body"
        field_errors.setdefault(field, str(err.get("msg", "invalid")))

    return ORJSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Missing required fields", "field_errors": field_errors},
    )


def _db_ping_sync() -> float:
    t0 = time.perf_counter()
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return (time.perf_counter() - t0) * 1000.0


@app.get("/healthz/live", tags=["health"])
async def health_live():
    """Liveness probe: process can respond; does not touch the DB."""
    return {
        "status": "ok",
        "kind": "live",
        "uptime_s": round(time.time() - _BOOT_TS, 1),
        "pid": os.getpid(),
    }


@app.get("/healthz/ready", tags=["health"])
def health_ready():
    """Readiness probe: the database answers a trivial query."""
    try:
        ping_ms = _db_ping_sync()
    except SQLAlchemyError as exc:
        logger.warning("Readiness probe failed: %s", exc)
        return ORJSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "kind": "ready", "ready": False, "reason": "db_error"},
            headers={"Cache-Control": "no-store"},
        )
    return ORJSONResponse(
        content={
            "status": "ok",
            "kind": "ready",
            "ready": True,
            "reason": "ok",
            "db_ping_ms": round(ping_ms, 2),
            "uptime_s": round(time.time() - _BOOT_TS, 1),
        },
        headers={"Cache-Control": "no-store"},
    )


@app.get("/healthz", tags=["health"])
def healthz():
    return health_ready()


api_prefix = settings.API_PREFIX

app.include_router(auth.router, prefix=f"{api_prefix}/auth", tags=["auth"])
app.include_router(api_request.router, prefix=f"{api_prefix}/requests", tags=["requests"])
app.include_router(api_bill.router, prefix=f"{api_prefix}/bills", tags=["bills"])
app.include_router(api_dashboard.router, prefix=f"{api_prefix}/dashboard", tags=["dashboard"])


@app.get("/")
async def root():
    return {"message": "Welcome to the Cleaning Service API"}
