"""Logging setup for the API process.

Environment knobs:

- LOG_LEVEL (default: INFO): root logger level
- DISABLE_ACCESS_LOG: silence uvicorn's per-request access lines
  (defaults to on when LOG_LEVEL is WARNING or above)
- LOG_SQL: echo SQLAlchemy statements at INFO
"""

from __future__ import annotations

import logging
import os

from pythonjsonlogger import jsonlogger

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _parse_bool(value: str | bool | None, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _resolve_level() -> int:
    # Process env first, then Settings (which may come from .env)
    level_name = (os.getenv("LOG_LEVEL") or settings.LOG_LEVEL or "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def setup_logging() -> None:
    """Send every record to stderr as one JSON object per line."""
    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers = [handler]
    level = _resolve_level()
    root.setLevel(level)

    access_logger = logging.getLogger("uvicorn.access")
    if _parse_bool(os.getenv("DISABLE_ACCESS_LOG"), level >= logging.WARNING):
        access_logger.handlers = []
        access_logger.propagate = False
        access_logger.disabled = True
    else:
        access_logger.disabled = False
        access_logger.setLevel(level)

    sql_level = logging.INFO if _parse_bool(os.getenv("LOG_SQL"), False) else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)
