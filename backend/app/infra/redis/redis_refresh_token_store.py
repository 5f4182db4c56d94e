from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

import redis  # type: ignore[import-untyped]

from app.services._shared.ports import RefreshTokenRecord, RefreshTokenStore, RotationResult


@dataclass(slots=True)
class RedisRefreshTokenStore(RefreshTokenStore):
    """
    Redis-backed refresh token store with atomic rotation.

    Layout: one hash per token (``rt:<token>``) expiring with the record, plus a
    per-user set index (``rt:u:<user_id>``) used by :meth:`delete_all_for_user`.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    # -------------------- helpers --------------------

    @staticmethod
    def _k(token: str) -> str:
        return f"rt:{token}"

    @staticmethod
    def _ku(user_id: int | str) -> str:
        return f"rt:u:{user_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        # naive -> label as UTC (no conversion)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return int(dt.timestamp())

    @staticmethod
    def _b(value: bytes | None, default: str = "") -> str:
        return value.decode() if value is not None else default

    def _stage_insert(self, pipe, record: RefreshTokenRecord, now_ts: int) -> None:
        key = self._k(record.token)
        pipe.hset(
            key,
            mapping={
                "user_id": str(record.user_id),
                "expires_at": str(self._to_ts(record.expires_at)),
                "created_at": str(self._to_ts(record.created_at)),
            },
        )
        pipe.expire(key, max(1, self._to_ts(record.expires_at) - now_ts))
        pipe.sadd(self._ku(record.user_id), record.token)

    # -------------------- API ------------------------

    def save(self, record: RefreshTokenRecord) -> None:
        """Insert the record *before* the token value is handed to the client."""
        pipe = self.r.pipeline(transaction=True)
        self._stage_insert(pipe, record, self._to_ts(datetime.now(UTC)))
        pipe.execute()

    def find(self, token: str) -> RefreshTokenRecord | None:
        h = self.r.hgetall(self._k(token))
        if not h:
            return None
        return RefreshTokenRecord(
            token=token,
            user_id=int(self._b(h.get(b"user_id"), "0")),
            expires_at=datetime.fromtimestamp(int(self._b(h.get(b"expires_at"), "0")), tz=UTC),
            created_at=datetime.fromtimestamp(int(self._b(h.get(b"created_at"), "0")), tz=UTC),
        )

    def delete(self, token: str) -> bool:
        key = self._k(token)
        uid_b = self.r.hget(key, "user_id")
        if not uid_b:
            return False
        with self.r.pipeline(transaction=True) as p:
            p.delete(key)
            p.srem(self._ku(uid_b.decode()), token)
            removed, _ = p.execute()
        return bool(removed)

    def rotate(
        self, *, old_token: str, replacement: RefreshTokenRecord, now: datetime
    ) -> RotationResult:
        """
        Atomically consume ``old_token`` and create ``replacement``.

        Uses Redis WATCH/MULTI/EXEC (optimistic locking): if another client
        touches ``old_token`` between the read and the EXEC, the transaction
        is retried and then observes the token as gone.
        """
        now_ts = self._to_ts(now)
        k_old = self._k(old_token)

        while True:
            try:
                with self.r.pipeline() as p:
                    p.watch(k_old)

                    h = p.hgetall(k_old)
                    if not h:
                        p.unwatch()
                        return RotationResult.NOT_FOUND

                    uid = self._b(h.get(b"user_id"))
                    exp = int(self._b(h.get(b"expires_at"), "0"))

                    p.multi()
                    p.delete(k_old)
                    p.srem(self._ku(uid), old_token)
                    if exp <= now_ts:
                        p.execute()
                        return RotationResult.EXPIRED

                    self._stage_insert(p, replacement, now_ts)
                    p.execute()
                return RotationResult.OK

            except redis.WatchError:
                # Concurrent modification detected; retry loop
                continue

    def delete_all_for_user(self, user_id: int) -> int:
        key_u = self._ku(user_id)
        tokens = [
            member.decode() if isinstance(member, bytes | bytearray) else str(member)
            for member in self.r.smembers(key_u)
        ]
        if not tokens:
            return 0
        pipe = self.r.pipeline(transaction=True)
        for token in tokens:
            pipe.delete(self._k(token))
        pipe.delete(key_u)
        results = pipe.execute()
        # Hashes may already have expired on their own; count what was removed.
        return sum(int(n) for n in results[:-1])
