"""
DTOs for ExternalAuthService.

Provider payloads are parsed into these immutable shapes at the HTTP edge so
the rest of the service never handles raw JSON dictionaries.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class OAuthClientConfig:
    """
    OAuth client registration and provider endpoints.

    :param client_id: OAuth client id.
    :param client_secret: OAuth client secret.
    :param redirect_uri: Callback URL registered with the provider.
    :param scopes: Space-separated scopes for the consent screen.
    :param auth_url: Consent-screen endpoint.
    :param token_url: Token endpoint (code and refresh grants).
    :param userinfo_url: User-info endpoint.
    :param timeout: Seconds to wait for any provider response.
    """

    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: str
    auth_url: str = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url: str = "https://oauth2.googleapis.com/token"
    userinfo_url: str = "https://www.googleapis.com/oauth2/v2/userinfo"
    timeout: float = 10.0


@dataclass(frozen=True, slots=True)
class ProviderTokens:
    """Result of a code or refresh grant (``refresh_token`` only on code grants)."""

    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None


@dataclass(frozen=True, slots=True)
class ProviderUserInfo:
    email: str
    name: str | None = None


@dataclass(frozen=True, slots=True)
class ExternalLoginOut:
    """
    Outcome of a successful external login callback.

    :param access_token: First-party access token.
    :param refresh_token: First-party refresh token (persisted, refreshable).
    :param expires_in: Advertised access-token lifetime in seconds.
    :param email: Email reported by the provider.
    """

    access_token: str
    refresh_token: str
    expires_in: int
    email: str
