"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request
from marshmallow import Schema

from app.api.gate import Identity, current_identity
from app.core.errors import Unauthorized

F = TypeVar("F", bound=Callable[..., Any])


def require_auth(func: F) -> F:
    """Reject anonymous requests with 401 (the gate already resolved the identity)."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        if not current_identity().is_authenticated:
            raise Unauthorized()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def authenticated_identity() -> Identity:
    """Identity of a request that passed :func:`require_auth`."""
    identity = current_identity()
    if identity.user_id is None:
        raise Unauthorized()
    return identity


def load_body(schema: Schema) -> dict[str, Any]:
    """Validate the JSON body with ``schema`` (marshmallow errors become 400)."""
    return schema.load(request.get_json(silent=True) or {})


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
