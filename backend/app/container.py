"""Composition root: builds every service with explicit constructor injection.

Nothing in the service layer looks collaborators up on its own; this module
reads the Flask config once at startup, picks the concrete adapters and
stores the resulting graph in ``app.extensions["services"]``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, cast

import requests
from flask import Flask, current_app

from app.core.extensions import get_redis
from app.infra.jwt import JWTTokenCodec
from app.infra.redis import RedisRefreshTokenStore
from app.infra.sql import SQLExternalTokenStore, SQLRefreshTokenStore
from app.services._shared.errors import ConfigurationError
from app.services._shared.ports import ExternalTokenStore, RefreshTokenStore, TokenCodec
from app.services.calendar.service import CalendarService
from app.services.external_auth.dto import OAuthClientConfig
from app.services.external_auth.service import ExternalAuthService
from app.services.quiz.service import QuizService
from app.services.session.dto import SessionConfig
from app.services.session.service import SessionService

log = logging.getLogger(__name__)

EXTENSION_KEY = "services"


@dataclass(slots=True)
class Services:
    """
    Process-wide service graph.

    ``external_auth`` and ``calendar`` are ``None`` when the OAuth client is
    misconfigured; the accessors then raise a new :class:`ConfigurationError`
    carrying the startup message, so only the external endpoints fail (500).
    """

    codec: TokenCodec
    refresh_store: RefreshTokenStore
    external_store: ExternalTokenStore
    sessions: SessionService
    quiz: QuizService
    external_auth: ExternalAuthService | None = None
    calendar: CalendarService | None = None
    external_error: str | None = None

    def _not_configured(self) -> ConfigurationError:
        return ConfigurationError(self.external_error or "External OAuth is not configured.")

    def require_external_auth(self) -> ExternalAuthService:
        if self.external_auth is None:
            raise self._not_configured()
        return self.external_auth

    def require_calendar(self) -> CalendarService:
        if self.calendar is None:
            raise self._not_configured()
        return self.calendar


def oauth_config_from(config: Mapping[str, Any]) -> OAuthClientConfig:
    """Map ``GOOGLE_*`` settings onto :class:`OAuthClientConfig`."""
    return OAuthClientConfig(
        client_id=str(config.get("GOOGLE_CLIENT_ID") or ""),
        client_secret=str(config.get("GOOGLE_CLIENT_SECRET") or ""),
        redirect_uri=str(config.get("GOOGLE_REDIRECT_URI") or ""),
        scopes=str(config.get("GOOGLE_SCOPES") or ""),
        auth_url=str(config["GOOGLE_AUTH_URL"]),
        token_url=str(config["GOOGLE_TOKEN_URL"]),
        userinfo_url=str(config["GOOGLE_USERINFO_URL"]),
        timeout=float(config.get("OAUTH_HTTP_TIMEOUT", 10)),
    )


def build_refresh_store(app: Flask) -> RefreshTokenStore:
    """Pick the refresh-token adapter from ``REFRESH_TOKEN_BACKEND``."""
    backend = str(app.config.get("REFRESH_TOKEN_BACKEND", "sql")).strip().lower()
    if backend == "sql":
        return SQLRefreshTokenStore()
    if backend == "redis":
        if not app.config.get("REDIS_URL"):
            raise ConfigurationError("REFRESH_TOKEN_BACKEND=redis requires REDIS_URL.")
        return RedisRefreshTokenStore(get_redis())
    raise ConfigurationError(f"Unknown REFRESH_TOKEN_BACKEND: {backend!r} (use 'sql' or 'redis').")


def build_services(app: Flask, *, http: requests.Session | None = None) -> Services:
    """
    Wire the concrete graph for ``app``.

    :param app: Configured application (extensions already initialized).
    :param http: Optional HTTP session shared by the provider clients.
    :raises ConfigurationError: For problems that make first-party sessions
        impossible (e.g. an unusable refresh-token backend).
    """
    codec = JWTTokenCodec(logger=logging.getLogger("app.infra.jwt"))
    refresh_store = build_refresh_store(app)
    external_store = SQLExternalTokenStore()
    sessions = SessionService(
        codec=codec,
        refresh_store=refresh_store,
        config=SessionConfig(
            refresh_ttl=timedelta(seconds=int(app.config["REFRESH_TOKEN_TTL_SECONDS"]))
        ),
        logger=logging.getLogger("app.services.session"),
    )
    services = Services(
        codec=codec,
        refresh_store=refresh_store,
        external_store=external_store,
        sessions=sessions,
        quiz=QuizService(logger=logging.getLogger("app.services.quiz")),
    )

    try:
        oauth_cfg = oauth_config_from(app.config)
        external_auth = ExternalAuthService(
            config=oauth_cfg,
            token_store=external_store,
            sessions=sessions,
            http=http,
            logger=logging.getLogger("app.services.external_auth"),
        )
    except ConfigurationError as exc:
        log.error("External OAuth disabled: %s", exc)
        services.external_error = str(exc)
        return services

    services.external_auth = external_auth
    services.calendar = CalendarService(
        external_auth=external_auth,
        events_url=str(app.config["GOOGLE_CALENDAR_URL"]),
        timeout=oauth_cfg.timeout,
        logger=logging.getLogger("app.services.calendar"),
    )
    return services


def init_app(app: Flask) -> None:
    """Build the service graph and attach it to ``app.extensions``."""
    app.extensions[EXTENSION_KEY] = build_services(app)


def get_services() -> Services:
    """Return the service graph of the current application."""
    return get_services_for(current_app)


def get_services_for(app: Flask) -> Services:
    """Return the service graph attached to ``app`` (no app context needed)."""
    return cast(Services, app.extensions[EXTENSION_KEY])
