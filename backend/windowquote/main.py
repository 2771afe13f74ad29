# backend/windowquote/main.py

import logging
import os
import time
from typing import Any, Iterable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from sqlalchemy.exc import TimeoutError as SA_TimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware

from . import models  # noqa: F401  (register tables on Base.metadata)
from .api import api_availability, api_booking, api_settings, auth
from .core.config import settings
from .core.observability import setup_logging
from .database import Base, engine
from .middleware.security_headers import SecurityHeadersMiddleware
from .services.seed import seed_database
from .utils.errors import AuthorizationError, NotFoundError, ValidationError

# Configure logging before creating any loggers
setup_logging()
logger = logging.getLogger(__name__)

_BOOT_TS = time.time()

Base.metadata.create_all(bind=engine)

# ORJSON for every JSON payload
app = FastAPI(title="Window Cleaning Quote API", default_response_class=ORJSONResponse)


def _merge_origins(*groups: Iterable[str]) -> list[str]:
    merged: list[str] = []
    for group in groups:
        for origin in group:
            if not origin:
                continue
            normalized = origin.rstrip("/")
            if normalized not in merged:
                merged.append(normalized)
    return merged


ALLOWED_ORIGINS = _merge_origins(settings.CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    # Browsers reject credentialed responses with a wildcard origin
    allow_credentials="*" not in ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info("CORS origins set to: %s", ALLOWED_ORIGINS)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1024)


@app.middleware("http")
async def catch_exceptions(request: Request, call_next):
    """Turn anything unhandled into a generic JSON 500 and log the detail."""
    try:
        return await call_next(request)
    except SA_TimeoutError as exc:  # DB pool timeout -> 503
        logger.error("DB timeout at %s: %s", request.url.path, str(exc))
        return ORJSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"message": "Database busy, please retry"},
        )
    except Exception as exc:
        logger.exception("Unhandled error at %s: %s", request.url.path, exc)
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal Server Error"},
        )


def _field_from_loc(loc: Iterable[Any]) -> Optional[str]:
    parts = [str(part) for part in loc]
    if parts and parts[0] in ("body", "query", "path", "header", "cookie"):
        parts = parts[1:]
    return ".".join(parts) or None


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report the first failing field as 400 ``{message, field}``."""
    errors = exc.errors()
    logger.warning("Validation error at %s: %s", request.url.path, errors)
    first = errors[0] if errors else {}
    content = {"message": first.get("msg", "Invalid request")}
    field = _field_from_loc(first.get("loc", ()))
    if field:
        content["field"] = field
    return ORJSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


@app.exception_handler(ValidationError)
async def domain_validation_handler(request: Request, exc: ValidationError):
    logger.warning("Validation error at %s: %s (field=%s)", request.url.path, exc.message, exc.field)
    return ORJSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(AuthorizationError)
async def authorization_handler(request: Request, exc: AuthorizationError):
    logger.info("Rejected unauthenticated request to %s", request.url.path)
    return ORJSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc) or "Unauthorized"},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return ORJSONResponse(status_code=exc.status_code, content={"message": str(exc) or "Not found"})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Return HTTP errors in the same ``{message[, field]}`` shape."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"message": exc.detail}
    if exc.status_code >= 500:
        logger.error("HTTP error %s at %s: %s", exc.status_code, request.url.path, exc.detail)
    return ORJSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.get("/healthz", tags=["health"])
async def healthz():
    """Liveness check: process can respond; does not touch the DB."""
    return {
        "status": "ok",
        "uptime_s": round(time.time() - _BOOT_TS, 1),
        "pid": os.getpid(),
    }


@app.get("/")
async def root():
    return {"message": f"{settings.BUSINESS_NAME} API"}


# ─── AUTH ROUTES (no /api prefix) ─────────────────────────────────────────────
app.include_router(auth.router, prefix="/auth", tags=["auth"])

# ─── PUBLIC + ADMIN API ───────────────────────────────────────────────────────
app.include_router(api_settings.router, prefix="/api")
app.include_router(api_booking.router, prefix="/api")
app.include_router(api_availability.router, prefix="/api")


@app.on_event("startup")
def run_seed() -> None:
    seed_database()
