"""
Logging setup and request observability middleware.

Adds correlation IDs and structured logging context to requests.
"""

import json
import time
import uuid
import logging
from logging.config import dictConfig
from traceback import format_exception
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("mclp")

_HTTP_FIELDS = ("correlation_id", "method", "path", "status_code", "duration_ms", "ip")


class JsonFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in _HTTP_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        for key in ("action", "actor_id", "entity_id", "metadata"):
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value

        if record.exc_info and record.exc_info[0]:
            payload["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stack": "".join(format_exception(*record.exc_info))[:4000],
            }

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """Configure the ``mclp`` logger tree."""
    formatter = "json" if json_logs else "plain"
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JsonFormatter},
            "plain": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "mclp": {"handlers": ["console"], "level": level.upper(), "propagate": False},
        },
    })


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """
    Tags every response with ``X-Correlation-ID`` and ``X-Process-Time``
    and writes one access line per request on the ``mclp`` logger.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Correlation-ID"] = correlation_id
        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}"

        fields = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "ip": request.client.host if request.client else "unknown",
        }
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(level, f"{request.method} {request.url.path} -> {response.status_code}", extra=fields)

        return response
