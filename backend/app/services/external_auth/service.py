# app/services/external_auth/service.py
"""
ExternalAuthService
===================

OAuth2 authorization-code flow against the external provider, plus the
provider token kept on the user's behalf:

- consent URL (``access_type=offline`` + ``prompt=consent`` so every grant
  returns a refresh token)
- code exchange and user-info lookup
- upsert of the stored provider token
- refresh-on-read of that token (lazy, no background refresh)
- the login callback, reported as a :class:`Result`
"""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import Any
from urllib.parse import urlencode

import requests

from app.core.config import PLACEHOLDER_CLIENT_ID, PLACEHOLDER_CLIENT_SECRET
from app.models.user import Role, User
from app.services._shared.base import BaseService, Clock
from app.services._shared.errors import (
    ConfigurationError,
    InvalidProviderResponseError,
    RefreshError,
    ServiceError,
    TokenExchangeError,
    UserInfoError,
)
from app.services._shared.ports import ExternalTokenRecord, ExternalTokenStore
from app.services._shared.result import Result
from app.services.external_auth.dto import (
    ExternalLoginOut,
    OAuthClientConfig,
    ProviderTokens,
    ProviderUserInfo,
)
from app.services.session.service import SessionService

# Upstream error text is summarized, never echoed in full.
MAX_ERROR_SUMMARY = 200

CLIENT_ID_HELP = (
    "External OAuth client_id is not configured. Set GOOGLE_CLIENT_ID "
    "(create OAuth 2.0 credentials at https://console.cloud.google.com/apis/credentials), "
    "together with GOOGLE_CLIENT_SECRET and GOOGLE_REDIRECT_URI."
)


def summarize_provider_error(resp: requests.Response | None, payload: dict[str, Any]) -> str:
    """
    Build a short, client-safe description of a provider failure.

    :param resp: Provider response (``None`` on transport errors).
    :param payload: Parsed JSON body (may be empty).
    :returns: ``"<error> - <error_description>"`` or ``"HTTP <status>"``,
        capped at :data:`MAX_ERROR_SUMMARY` characters.
    """
    error = payload.get("error")
    if isinstance(error, dict):
        # Google APIs wrap errors as {"error": {"code": .., "message": ..}}
        summary = str(error.get("message") or error.get("status") or "unknown_error")
    elif error:
        summary = str(error)
        description = payload.get("error_description")
        if description:
            summary = f"{summary} - {description}"
    elif resp is not None:
        summary = f"HTTP {resp.status_code}"
    else:
        summary = "unknown_error"
    return summary[:MAX_ERROR_SUMMARY]


def json_body(resp: requests.Response) -> dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class ExternalAuthService(BaseService):
    """
    Application service for the external identity/calendar provider.

    The client configuration is validated when the service is built; a
    placeholder or blank credential raises :class:`ConfigurationError` so no
    request is ever attempted with it.
    """

    def __init__(
        self,
        *,
        config: OAuthClientConfig,
        token_store: ExternalTokenStore,
        sessions: SessionService,
        http: requests.Session | None = None,
        logger: logging.Logger | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param config: OAuth client registration and endpoints.
        :param token_store: Per-user provider token store.
        :param sessions: Session service used to mint first-party sessions.
        :param http: HTTP session for provider calls (injectable for tests).
        :raises ConfigurationError: On blank or placeholder credentials.
        """
        super().__init__(logger=logger, clock=clock)
        self.cfg = config
        self.token_store = token_store
        self.sessions = sessions
        self.http = http or requests.Session()
        self._validate_config()

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    def _validate_config(self) -> None:
        cfg = self.cfg
        if not cfg.client_id.strip() or cfg.client_id == PLACEHOLDER_CLIENT_ID:
            raise ConfigurationError(CLIENT_ID_HELP)
        if not cfg.client_secret.strip() or cfg.client_secret == PLACEHOLDER_CLIENT_SECRET:
            raise ConfigurationError(
                "External OAuth client_secret is not configured. Set GOOGLE_CLIENT_SECRET."
            )
        if not cfg.redirect_uri.strip():
            raise ConfigurationError(
                "External OAuth redirect_uri is not configured. Set GOOGLE_REDIRECT_URI."
            )

    def _require_credentials(self) -> None:
        # Re-checked per call; the config object may be swapped in tests.
        if not self.cfg.client_id.strip() or not self.cfg.client_secret.strip():
            raise ConfigurationError(
                "External OAuth credentials are missing. "
                "Configure GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET."
            )

    # ------------------------------------------------------------------ #
    # Authorization URL
    # ------------------------------------------------------------------ #

    def build_authorization_url(self) -> str:
        """Return the provider consent-screen URL for this client."""
        self._require_credentials()
        params = {
            "client_id": self.cfg.client_id,
            "redirect_uri": self.cfg.redirect_uri,
            "response_type": "code",
            "scope": self.cfg.scopes,
            "access_type": "offline",  # ask for a refresh token
            "prompt": "consent",  # ... on every grant, not just the first
        }
        return f"{self.cfg.auth_url}?{urlencode(params)}"

    # ------------------------------------------------------------------ #
    # Provider calls
    # ------------------------------------------------------------------ #

    def exchange_code_for_tokens(self, code: str) -> ProviderTokens:
        """
        Exchange an authorization code at the token endpoint.

        :raises ConfigurationError: If client credentials are missing.
        :raises TokenExchangeError: On transport failure, non-2xx status or an
            ``error`` payload.
        :raises InvalidProviderResponseError: If no ``access_token`` came back.
        """
        self._require_credentials()
        payload = self._post_token_endpoint(
            {
                "code": code,
                "client_id": self.cfg.client_id,
                "client_secret": self.cfg.client_secret,
                "redirect_uri": self.cfg.redirect_uri,
                "grant_type": "authorization_code",
            },
            failure=TokenExchangeError,
            label="Token exchange failed",
        )
        return self._parse_tokens(payload)

    def refresh_access_token(self, refresh_token: str) -> ProviderTokens:
        """
        Run the refresh grant for a stored provider refresh token.

        :raises ConfigurationError: If client credentials are missing.
        :raises RefreshError: On transport failure, non-2xx status or an
            ``error`` payload.
        :raises InvalidProviderResponseError: If no ``access_token`` came back.
        """
        self._require_credentials()
        payload = self._post_token_endpoint(
            {
                "client_id": self.cfg.client_id,
                "client_secret": self.cfg.client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
            failure=RefreshError,
            label="Token refresh failed",
        )
        return self._parse_tokens(payload)

    def fetch_user_info(self, access_token: str) -> ProviderUserInfo:
        """
        Fetch the provider profile behind ``access_token``.

        :raises UserInfoError: On transport failure or non-2xx status.
        :raises InvalidProviderResponseError: If the profile carries no email.
        """
        try:
            resp = self.http.get(
                self.cfg.userinfo_url,
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=self.cfg.timeout,
            )
        except requests.RequestException as exc:
            raise UserInfoError(f"User info request failed: {type(exc).__name__}") from exc

        payload = json_body(resp)
        if not resp.ok:
            self.log.warning(
                "User info rejected by provider", extra={"provider_status": resp.status_code}
            )
            raise UserInfoError(
                f"User info request failed: {summarize_provider_error(resp, payload)}"
            )

        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise InvalidProviderResponseError("No email received from provider")
        name = payload.get("name")
        return ProviderUserInfo(email=email, name=name if isinstance(name, str) else None)

    # ------------------------------------------------------------------ #
    # Stored provider token
    # ------------------------------------------------------------------ #

    def save_external_token(
        self,
        user_id: int,
        access_token: str,
        refresh_token: str | None = None,
        expires_in: int | None = None,
    ) -> ExternalTokenRecord:
        """Upsert the user's provider token; a missing ``refresh_token`` keeps the stored one."""
        expires_at = self.now_utc() + timedelta(seconds=expires_in) if expires_in else None
        return self.token_store.upsert(
            user_id=user_id,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
        )

    def get_access_token(self, user_id: int) -> str | None:
        """
        Return a usable provider access token for ``user_id``.

        ``None`` means the account is not linked. An expired token is
        refreshed synchronously and persisted before being returned. An
        expired token without a refresh token is returned as-is (stale).

        :raises RefreshError: If the refresh grant fails (not cached).
        """
        record = self.token_store.get_for_user(user_id)
        if record is None:
            return None

        if not record.is_expired(self.now_utc()):
            return record.access_token

        if not record.refresh_token:
            self.log.warning(
                "Provider token expired and no refresh token is stored; returning stale token",
                extra={"user_id": user_id},
            )
            return record.access_token

        refreshed = self.refresh_access_token(record.refresh_token)
        expires_at = (
            self.now_utc() + timedelta(seconds=refreshed.expires_in)
            if refreshed.expires_in
            else record.expires_at
        )
        self.token_store.update_access_token(
            user_id=user_id, access_token=refreshed.access_token, expires_at=expires_at
        )
        self.log.info("Provider token refreshed", extra={"user_id": user_id})
        return refreshed.access_token

    # ------------------------------------------------------------------ #
    # Login callback
    # ------------------------------------------------------------------ #

    def complete_login(self, code: str | None) -> Result[ExternalLoginOut]:
        """
        Finish the authorization-code flow and open a first-party session.

        Steps: exchange code → fetch profile → find or create the user →
        store the provider token → issue a session. Any typed failure is
        returned in the :class:`Result` instead of being raised.
        """
        if not code or not code.strip():
            return Result.failure(ServiceError("Missing required parameter: code"))

        try:
            tokens = self.exchange_code_for_tokens(code)
            info = self.fetch_user_info(tokens.access_token)
            user_id = self._find_or_create_user(info)
            self.save_external_token(
                user_id, tokens.access_token, tokens.refresh_token, tokens.expires_in
            )
            bundle = self.sessions.issue_session(user_id)
        except ServiceError as exc:
            self.log.warning("External login failed: %s", exc.kind.value)
            return Result.failure(exc)

        self.log.info("External login succeeded", extra={"user_id": user_id})
        return Result.success(
            ExternalLoginOut(
                access_token=bundle.access_token,
                refresh_token=bundle.refresh_token,
                expires_in=bundle.expires_in,
                email=info.email,
            )
        )

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _post_token_endpoint(
        self, form: dict[str, str], *, failure: type[ServiceError], label: str
    ) -> dict[str, Any]:
        try:
            resp = self.http.post(
                self.cfg.token_url,
                data=form,
                headers={"Accept": "application/json"},
                timeout=self.cfg.timeout,
            )
        except requests.RequestException as exc:
            raise failure(f"{label}: {type(exc).__name__}") from exc

        payload = json_body(resp)
        if not resp.ok or "error" in payload:
            self.log.warning("%s", label, extra={"provider_status": resp.status_code})
            raise failure(f"{label}: {summarize_provider_error(resp, payload)}")
        return payload

    @staticmethod
    def _parse_tokens(payload: dict[str, Any]) -> ProviderTokens:
        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise InvalidProviderResponseError("No access_token received from provider")
        refresh_token = payload.get("refresh_token")
        expires_in = payload.get("expires_in")
        if isinstance(expires_in, str) and expires_in.isdigit():
            expires_in = int(expires_in)
        return ProviderTokens(
            access_token=access_token,
            refresh_token=refresh_token if isinstance(refresh_token, str) else None,
            expires_in=int(expires_in) if isinstance(expires_in, int | float) else None,
        )

    def _find_or_create_user(self, info: ProviderUserInfo) -> int:
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(info.email)
            if user is None:
                # Federated accounts get an unguessable password they never use.
                user = uow.users.add(
                    User(
                        email=info.email,
                        name=info.name,
                        password=secrets.token_urlsafe(32),
                        role=Role.USER,
                    )
                )
                self.log.info("Federated user created", extra={"user_id": user.id})
            elif user.name is None and info.name:
                user.name = info.name
            return user.id
