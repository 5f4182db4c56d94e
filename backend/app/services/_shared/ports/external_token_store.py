from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class ExternalTokenRecord:
    """
    Provider credentials held for one user.

    :ivar user_id: Owner user id.
    :ivar access_token: Latest provider access token.
    :ivar refresh_token: Provider refresh token (``None`` when never granted).
    :ivar expires_at: Access-token expiry; ``None`` means unknown.
    :ivar updated_at: Last write instant (UTC).
    """

    user_id: int
    access_token: str
    refresh_token: str | None
    expires_at: datetime | None
    updated_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now


class ExternalTokenStore(Protocol):
    """At most one :class:`ExternalTokenRecord` per user (upsert semantics)."""

    def get_for_user(self, user_id: int) -> ExternalTokenRecord | None: ...

    def upsert(
        self,
        *,
        user_id: int,
        access_token: str,
        refresh_token: str | None,
        expires_at: datetime | None,
    ) -> ExternalTokenRecord:
        """
        Insert or update the user's record.

        An existing refresh token is kept when ``refresh_token`` is ``None``.
        """
        ...

    def update_access_token(
        self, *, user_id: int, access_token: str, expires_at: datetime | None
    ) -> ExternalTokenRecord | None:
        """Replace only the access token and expiry. :returns: ``None`` when absent."""
        ...


class InMemoryExternalTokenStore(ExternalTokenStore):
    """Dictionary-backed store for unit tests."""

    def __init__(self) -> None:
        self._by_user: dict[int, ExternalTokenRecord] = {}
        self._lock = threading.Lock()

    def get_for_user(self, user_id: int) -> ExternalTokenRecord | None:
        return self._by_user.get(user_id)

    def upsert(
        self,
        *,
        user_id: int,
        access_token: str,
        refresh_token: str | None,
        expires_at: datetime | None,
    ) -> ExternalTokenRecord:
        with self._lock:
            current = self._by_user.get(user_id)
            record = ExternalTokenRecord(
                user_id=user_id,
                access_token=access_token,
                refresh_token=refresh_token or (current.refresh_token if current else None),
                expires_at=expires_at,
                updated_at=datetime.now(UTC),
            )
            self._by_user[user_id] = record
            return record

    def update_access_token(
        self, *, user_id: int, access_token: str, expires_at: datetime | None
    ) -> ExternalTokenRecord | None:
        with self._lock:
            current = self._by_user.get(user_id)
            if current is None:
                return None
            record = replace(
                current,
                access_token=access_token,
                expires_at=expires_at,
                updated_at=datetime.now(UTC),
            )
            self._by_user[user_id] = record
            return record
