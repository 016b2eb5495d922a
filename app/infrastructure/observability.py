"""Structured Logging — JSON formatter, setup, and HTTP request logging.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (error_code, path, method, status_code, ...) surfaced when present
    - setup_logging is idempotent: repeated calls replace the handler it installed
    - Request log level follows status: 5xx ERROR, 4xx WARNING, else INFO
"""

import json
import logging
import time
from datetime import datetime, timezone

from fastapi import Request

_HANDLER_NAME = "bestsub"
_EXTRA_FIELDS = (
    "error_code", "path", "method", "status_code",
    "latency_ms", "client_ip", "user_id", "sub_id",
)

logger = logging.getLogger("app.http")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "text"):
    """Configure logging for the application."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-5s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


async def log_requests(request: Request, call_next):
    """HTTP middleware: one line per request with status and latency."""
    start = time.perf_counter()
    response = await call_next(request)
    latency_ms = round((time.perf_counter() - start) * 1000, 2)

    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    client_ip = request.client.host if request.client else "-"
    status_code = response.status_code

    if status_code >= 500:
        level = logging.ERROR
    elif status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.log(
        level,
        f"[HTTP] {request.method:<7}| {status_code:3d} | {latency_ms:>8}ms | "
        f"{client_ip:>15} | {path}",
        extra={
            "method": request.method, "status_code": status_code,
            "latency_ms": latency_ms, "client_ip": client_ip, "path": path,
        },
    )
    return response
