"""Logging setup for processes embedding the identity store.

Everything goes to stdout. Levels and format come from environment
variables, so this can run before Settings are loaded.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
import sys
from datetime import UTC, datetime
from typing import Any

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Structured fields the stores and the authenticator pass via ``extra``.
# Credentials are never attached to records.
EXTRA_FIELDS = (
    "login",
    "user_id",
    "login_source_id",
    "error_type",
    "error_code",
    "status_code",
)

# Third-party loggers and the env var overriding each one's level.
LIBRARY_LOGGERS = {
    "sqlalchemy.engine": "SQL_LOG_LEVEL",
    "httpx": "HTTPX_LOG_LEVEL",
    "httpcore": "HTTPX_LOG_LEVEL",
}


def _env_bool(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _env_level(name: str, default: str) -> str:
    return os.getenv(name, default).strip().upper()


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with the known ``extra`` fields lifted in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (key, record.__dict__[key])
            for key in EXTRA_FIELDS
            if key in record.__dict__
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging() -> None:
    """Install a stdout handler on the root logger.

    Env vars:
    - LOG_LEVEL: root level (default: INFO)
    - LOG_JSON: emit JSON lines instead of text (default: false)
    - SQL_LOG_LEVEL: sqlalchemy.engine level (default: WARNING)
    - HTTPX_LOG_LEVEL: httpx/httpcore level (default: WARNING)
    """
    level = _env_level("LOG_LEVEL", "INFO")
    formatter = "json" if _env_bool("LOG_JSON", default=False) else "text"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {"format": TEXT_FORMAT},
                "json": {"()": "idstore.core.logging.JsonFormatter"},
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter,
                    "stream": sys.stdout,
                }
            },
            "root": {"handlers": ["stdout"], "level": level},
            "loggers": {
                name: {"level": _env_level(var, "WARNING"), "propagate": True}
                for name, var in LIBRARY_LOGGERS.items()
            },
        }
    )
