"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP directly. They serve as stable contracts between
repositories, adapters, and application services.

Each error carries an :class:`ErrorKind`; the translation to HTTP responses
(RFC 7807) happens once, in ``app/core/errors.py``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    # PostgreSQL includes the constraint name, SQLite the column list.
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


class ErrorKind(Enum):
    """Stable classification of service failures."""

    BAD_REQUEST = "bad_request"
    CONFLICT = "conflict"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "expired_token"
    NOT_FOUND = "not_found"
    NOT_LINKED = "not_linked"
    CONFIGURATION = "configuration_error"
    TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
    INVALID_PROVIDER_RESPONSE = "invalid_provider_response"
    USER_INFO_FAILED = "user_info_failed"
    REFRESH_FAILED = "refresh_failed"
    UPSTREAM_FAILED = "upstream_failed"


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - ``kind`` drives the HTTP status chosen by the API layer.
    """

    kind: ErrorKind = ErrorKind.BAD_REQUEST


# --------------------------------------------------------------------------- #
# Persistence / identity
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    kind = ErrorKind.NOT_FOUND

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    kind = ErrorKind.CONFLICT

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


# --------------------------------------------------------------------------- #
# Session / credentials
# --------------------------------------------------------------------------- #


class InvalidCredentialsError(ServiceError):
    """Unknown email or wrong password (deliberately indistinguishable)."""

    kind = ErrorKind.INVALID_CREDENTIALS

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class InvalidTokenError(ServiceError):
    """Refresh token unknown, already rotated away, or revoked."""

    kind = ErrorKind.INVALID_TOKEN

    def __init__(self, message: str = "Invalid refresh token") -> None:
        super().__init__(message)


class ExpiredTokenError(ServiceError):
    """Refresh token presented after its expiry."""

    kind = ErrorKind.EXPIRED_TOKEN

    def __init__(self, message: str = "Refresh token expired") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# External provider
# --------------------------------------------------------------------------- #


class ConfigurationError(ServiceError):
    """
    Missing or placeholder external-provider credentials (or unsafe secrets).

    The message is operator-facing and may include remediation steps.
    """

    kind = ErrorKind.CONFIGURATION


class NotLinkedError(ServiceError):
    """The user has no stored external token."""

    kind = ErrorKind.NOT_LINKED

    def __init__(
        self, message: str = "No external account linked. Please complete the OAuth flow first."
    ) -> None:
        super().__init__(message)


class ProviderError(ServiceError):
    """Base class for failures talking to the OAuth provider."""

    kind = ErrorKind.UPSTREAM_FAILED


class TokenExchangeError(ProviderError):
    """Authorization code rejected, or the token endpoint failed."""

    kind = ErrorKind.TOKEN_EXCHANGE_FAILED


class InvalidProviderResponseError(ProviderError):
    """Provider answered successfully but without the expected fields."""

    kind = ErrorKind.INVALID_PROVIDER_RESPONSE


class UserInfoError(ProviderError):
    """The userinfo endpoint could not be reached or refused the token."""

    kind = ErrorKind.USER_INFO_FAILED


class RefreshError(ProviderError):
    """The refresh grant failed."""

    kind = ErrorKind.REFRESH_FAILED


class CalendarError(ProviderError):
    """Calendar API call failed."""

    kind = ErrorKind.UPSTREAM_FAILED
