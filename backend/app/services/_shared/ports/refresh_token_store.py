from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Protocol


class RotationResult(Enum):
    """Outcome of an atomic refresh rotation attempt."""

    OK = auto()
    NOT_FOUND = auto()
    EXPIRED = auto()


@dataclass(frozen=True, slots=True)
class RefreshTokenRecord:
    """
    One persisted refresh credential.

    :ivar token: Opaque token value (unique).
    :ivar user_id: Owner user id (plain id, never a loaded user).
    :ivar expires_at: Absolute expiration (UTC).
    :ivar created_at: Issuance instant (UTC).
    """

    token: str
    user_id: int
    expires_at: datetime
    created_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class RefreshTokenStore(Protocol):
    """
    Stateful store for refresh-token records keyed by token value.

    ``rotate`` MUST be a compare-and-delete: only the caller whose delete
    actually removed ``old_token`` may insert the replacement.
    """

    def save(self, record: RefreshTokenRecord) -> None:
        """Persist a brand-new record."""

    def find(self, token: str) -> RefreshTokenRecord | None:
        """Fetch a record by token value (if present)."""

    def delete(self, token: str) -> bool:
        """Delete a record. :returns: True if it existed."""

    def rotate(
        self, *, old_token: str, replacement: RefreshTokenRecord, now: datetime
    ) -> RotationResult:
        """
        Atomically consume ``old_token`` and store ``replacement``.

        An expired ``old_token`` is deleted and reported as ``EXPIRED``;
        ``replacement`` is only stored on ``OK``.
        """

    def delete_all_for_user(self, user_id: int) -> int:
        """
        Delete every record owned by ``user_id``.

        :returns: Number of records removed.
        """


class InMemoryRefreshTokenStore(RefreshTokenStore):
    """
    In-memory refresh-token store with atomic rotation behavior.

    .. note::
       Uses a threading lock so concurrent rotations of one value see exactly
       one winner.
    """

    def __init__(self) -> None:
        self._by_token: dict[str, RefreshTokenRecord] = {}
        self._lock = threading.Lock()

    def save(self, record: RefreshTokenRecord) -> None:
        with self._lock:
            self._by_token[record.token] = record

    def find(self, token: str) -> RefreshTokenRecord | None:
        with self._lock:
            return self._by_token.get(token)

    def delete(self, token: str) -> bool:
        with self._lock:
            return self._by_token.pop(token, None) is not None

    def rotate(
        self, *, old_token: str, replacement: RefreshTokenRecord, now: datetime
    ) -> RotationResult:
        with self._lock:
            current = self._by_token.pop(old_token, None)
            if current is None:
                return RotationResult.NOT_FOUND
            if current.is_expired(now):
                return RotationResult.EXPIRED
            self._by_token[replacement.token] = replacement
            return RotationResult.OK

    def delete_all_for_user(self, user_id: int) -> int:
        with self._lock:
            doomed = [t for t, rec in self._by_token.items() if rec.user_id == user_id]
            for token in doomed:
                del self._by_token[token]
            return len(doomed)

    def __len__(self) -> int:
        return len(self._by_token)
