# app/infra/sql/sql_external_token_store.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.models.base import as_utc, utcnow
from app.models.external_token import ExternalToken
from app.services._shared.ports import ExternalTokenRecord, ExternalTokenStore
from app.uow import SQLAlchemyUnitOfWork


def _to_record(row: ExternalToken) -> ExternalTokenRecord:
    return ExternalTokenRecord(
        user_id=row.user_id,
        access_token=row.access_token,
        refresh_token=row.refresh_token,
        expires_at=as_utc(row.expires_at),
        updated_at=as_utc(row.updated_at) or utcnow(),
    )


@dataclass(slots=True)
class SQLExternalTokenStore(ExternalTokenStore):
    """Relational external-token store (table ``external_tokens``, unique ``user_id``)."""

    def get_for_user(self, user_id: int) -> ExternalTokenRecord | None:
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.external_tokens.get_for_user(user_id)
            return _to_record(row) if row else None

    def upsert(
        self,
        *,
        user_id: int,
        access_token: str,
        refresh_token: str | None,
        expires_at: datetime | None,
    ) -> ExternalTokenRecord:
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.external_tokens.get_for_user(user_id)
            if row is None:
                row = uow.external_tokens.add(
                    ExternalToken(
                        user_id=user_id,
                        access_token=access_token,
                        refresh_token=refresh_token,
                        expires_at=expires_at,
                    )
                )
            else:
                row.access_token = access_token
                # Providers omit the refresh token on repeat grants; keep the stored one.
                if refresh_token:
                    row.refresh_token = refresh_token
                row.expires_at = expires_at
                row.updated_at = utcnow()
                uow.external_tokens.flush()
            return _to_record(row)

    def update_access_token(
        self, *, user_id: int, access_token: str, expires_at: datetime | None
    ) -> ExternalTokenRecord | None:
        with SQLAlchemyUnitOfWork() as uow:
            row = uow.external_tokens.get_for_user(user_id)
            if row is None:
                return None
            row.access_token = access_token
            row.expires_at = expires_at
            row.updated_at = utcnow()
            uow.external_tokens.flush()
            return _to_record(row)
