"""
DTOs for SessionService.

Data Transfer Objects (DTOs) isolate the service layer from ORM models,
ensuring clear input/output contracts and type safety.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

# Seconds reported as ``expiresIn`` in every token bundle.
ADVERTISED_EXPIRES_IN = 900

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class SignupIn:
    """
    Input DTO for account registration.

    :param email: Login email (normalized to lowercase by the model).
    :type email: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    """

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class SigninIn:
    """
    Input DTO for password sign-in.

    :param email: Login email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Public projection of a user.

    :param id: User identifier.
    :param email: Login email.
    :param role: Role name (``"USER"`` / ``"ADMIN"``).
    """

    id: int
    email: str
    role: str


@dataclass(frozen=True, slots=True)
class TokenBundle:
    """
    Access/refresh pair returned by signin, refresh and the external callback.

    :param access_token: Signed access token.
    :param refresh_token: Opaque, single-use refresh token.
    :param token_type: Always ``"Bearer"``.
    :param expires_in: Advertised access-token lifetime in seconds.
    """

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = ADVERTISED_EXPIRES_IN


# ------------------------------- Config ------------------------------------ #


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """
    Session lifetime configuration.

    :param refresh_ttl: Lifetime of persisted refresh tokens.
    :type refresh_ttl: timedelta
    """

    refresh_ttl: timedelta = timedelta(days=7)
