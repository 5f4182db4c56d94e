"""JSON logging for the API.

Every record carries the request id (``X-Request-ID``, or a generated UUID4)
and, once the authentication gate has run, the caller's ``user_id``. Token
and provider outcomes are attached by the emitting module through
``extra={"token_status": ...}`` or ``extra={"provider_status": ...}``; token
values themselves are never logged.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
INCOMING_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")
MAX_REQUEST_ID_LENGTH = 128

#: Optional record attributes copied into the JSON payload when present.
CONTEXT_FIELDS = ("user_id", "token_status", "provider_status", "endpoint", "elapsed_ms")


def _incoming_request_id() -> str | None:
    for header in INCOMING_ID_HEADERS:
        value = (request.headers.get(header) or "").strip()
        if value:
            return value[:MAX_REQUEST_ID_LENGTH]
    return None


def ensure_request_id() -> str:
    """Return the request id stored on ``g``, creating it on first use.

    Outside a request a fresh UUID4 is returned and nothing is stored.
    """
    if not has_request_context():
        return str(uuid4())
    current = g.get("request_id")
    if current is None:
        current = _incoming_request_id() or str(uuid4())
        g.request_id = current
    return current


class JSONFormatter(logging.Formatter):
    """One JSON object per line: time, level, logger, message, request id and context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update(
            {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}
        )
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` and, for authenticated requests, ``user_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        if has_request_context() and not hasattr(record, "user_id"):
            user_id = getattr(g.get("identity"), "user_id", None)
            if user_id is not None:
                record.user_id = user_id
        return True


def configure_logging(level: str | int = "INFO") -> None:
    """Send all records to stdout as JSON; replaces existing root handlers."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Seed the request id before each request and echo it on every response."""
    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = [
    "JSONFormatter",
    "REQUEST_ID_HEADER",
    "RequestIdFilter",
    "configure_logging",
    "ensure_request_id",
    "init_app",
]
