from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Protocol
from uuid import uuid4


class TokenStatus(Enum):
    """Classification of an access-token verification attempt."""

    VALID = "valid"
    EXPIRED = "expired"
    BAD_SIGNATURE = "bad_signature"
    MALFORMED = "malformed"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class AccessClaims:
    """
    Verified claim set of an access token.

    :ivar user_id: Subject identifier.
    :ivar email: Email at issuance time.
    :ivar role: Role name (``"USER"`` / ``"ADMIN"``).
    :ivar issued_at: ``iat`` (UTC).
    :ivar expires_at: ``exp`` (UTC).
    """

    user_id: int
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec(Protocol):
    """Port for issuing and verifying access tokens and minting refresh values."""

    def issue_access_token(self, *, user_id: int, email: str, role: str) -> str: ...

    def inspect(self, token: str) -> tuple[TokenStatus, AccessClaims | None]:
        """Verify ``token`` and classify the outcome (claims only when ``VALID``)."""
        ...

    def verify(self, token: str) -> AccessClaims | None:
        """Return claims for a valid token, ``None`` for any failure."""
        ...

    def new_refresh_token(self) -> str:
        """Return a fresh opaque refresh-token value (no embedded claims)."""
        ...


class StubTokenCodec(TokenCodec):
    """Deterministic codec used in unit tests (tokens are lookup keys, not signed)."""

    def __init__(self, *, ttl: timedelta = timedelta(minutes=15)) -> None:
        self.ttl = ttl
        self._seq = 0
        self._issued: dict[str, AccessClaims] = {}

    def issue_access_token(self, *, user_id: int, email: str, role: str) -> str:
        self._seq += 1
        now = datetime.now(UTC)
        token = f"access.{user_id}.{self._seq}"
        self._issued[token] = AccessClaims(
            user_id=user_id,
            email=email,
            role=role,
            issued_at=now,
            expires_at=now + self.ttl,
        )
        return token

    def inspect(self, token: str) -> tuple[TokenStatus, AccessClaims | None]:
        claims = self._issued.get(token)
        if claims is None:
            return TokenStatus.MALFORMED, None
        if claims.expires_at <= datetime.now(UTC):
            return TokenStatus.EXPIRED, None
        return TokenStatus.VALID, claims

    def verify(self, token: str) -> AccessClaims | None:
        return self.inspect(token)[1]

    def new_refresh_token(self) -> str:
        return str(uuid4())
