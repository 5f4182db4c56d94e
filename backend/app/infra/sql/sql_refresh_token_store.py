# app/infra/sql/sql_refresh_token_store.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.models.base import as_utc
from app.models.refresh_token import RefreshToken
from app.services._shared.ports import RefreshTokenRecord, RefreshTokenStore, RotationResult
from app.uow import SQLAlchemyUnitOfWork


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        token=row.token,
        user_id=row.user_id,
        expires_at=as_utc(row.expires_at),  # type: ignore[arg-type]
        created_at=as_utc(row.created_at),  # type: ignore[arg-type]
    )


@dataclass(slots=True)
class SQLRefreshTokenStore(RefreshTokenStore):
    """
    Relational refresh-token store (table ``refresh_tokens``).

    Every method runs in its own :class:`SQLAlchemyUnitOfWork`, so each write
    is committed (or rolled back) before the method returns.
    """

    def save(self, record: RefreshTokenRecord) -> None:
        with SQLAlchemyUnitOfWork() as uow:
            uow.refresh_tokens.add(
                RefreshToken(
                    token=record.token,
                    user_id=record.user_id,
                    expires_at=record.expires_at,
                    created_at=record.created_at,
                )
            )

    def find(self, token: str) -> RefreshTokenRecord | None:
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.refresh_tokens.get_by_token(token)
            return _to_record(row) if row else None

    def delete(self, token: str) -> bool:
        with SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_tokens.delete_by_token(token) > 0

    def rotate(
        self, *, old_token: str, replacement: RefreshTokenRecord, now: datetime
    ) -> RotationResult:
        """
        Consume ``old_token`` and insert ``replacement`` in one transaction.

        The single ``DELETE ... WHERE token = :old`` decides the winner: a
        concurrent caller that finds zero affected rows gets ``NOT_FOUND``.
        """
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.refresh_tokens.get_by_token(old_token)
            if row is None:
                return RotationResult.NOT_FOUND
            expires_at = as_utc(row.expires_at)
            if uow.refresh_tokens.delete_by_token(old_token) == 0:
                return RotationResult.NOT_FOUND
            if expires_at is not None and expires_at <= now:
                return RotationResult.EXPIRED
            uow.refresh_tokens.add(
                RefreshToken(
                    token=replacement.token,
                    user_id=replacement.user_id,
                    expires_at=replacement.expires_at,
                    created_at=replacement.created_at,
                )
            )
            return RotationResult.OK

    def delete_all_for_user(self, user_id: int) -> int:
        with SQLAlchemyUnitOfWork() as uow:
            return uow.refresh_tokens.delete_for_user(user_id)
