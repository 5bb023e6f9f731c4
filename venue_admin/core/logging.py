"""
Logging configuration

Records are emitted as JSON by default. Every record logged while a request
is being served carries that request's id, so the provisioning steps of one
venue creation can be followed across services.
"""

import logging
import logging.config
import json
import os
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

from venue_admin.config import settings

# Set by the request middleware in main.py
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

CONTEXT_FIELDS = ("request_id", "venue_id", "step")


class RequestContextFilter(logging.Filter):
    """Stamp the current request id onto each record"""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    """
    JSON formatter; venue and provisioning context is passed with ``extra=``
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def build_log_config() -> dict:
    app_handlers = ["console"]
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "json" if settings.LOG_FORMAT == "json" else "default",
            "filters": ["request_context"],
            "stream": "ext://sys.stdout"
        }
    }

    if not settings.is_testing:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": settings.LOG_LEVEL,
            "formatter": "json",
            "filters": ["request_context"],
            "filename": "logs/venue_admin.log",
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5
        }
        app_handlers.append("file")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_context": {"()": RequestContextFilter}
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"
            },
            "json": {
                "()": JSONFormatter
            }
        },
        "handlers": handlers,
        "loggers": {
            "venue_admin": {
                "level": settings.LOG_LEVEL,
                "handlers": app_handlers,
                "propagate": False
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False
            },
            "sqlalchemy": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False
            }
        },
        "root": {
            "level": settings.LOG_LEVEL,
            "handlers": ["console"]
        }
    }


def setup_logging():
    """
    Configure application logging
    """
    if not settings.is_testing:
        os.makedirs("logs", exist_ok=True)

    logging.config.dictConfig(build_log_config())
