"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text

from app.api.deps import json_response, timing
from app.container import get_services
from app.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Report database reachability and whether external OAuth is usable."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except Exception:  # pragma: no cover - depends on DB backend
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    services = get_services()
    payload = {
        "status": "ok",
        "db": db_status,
        "refreshStore": current_app.config.get("REFRESH_TOKEN_BACKEND", "sql"),
        "externalAuth": "ok" if services.external_auth is not None else "disabled",
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload)
