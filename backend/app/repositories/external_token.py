"""External-token repository (persistence only)."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from app.models.external_token import ExternalToken
from app.repositories.base import BaseRepository


class ExternalTokenRepository(BaseRepository[ExternalToken]):
    """Persistence-only repository for :class:`ExternalToken` (one row per user)."""

    model = ExternalToken

    def get_for_user(self, user_id: int) -> ExternalToken | None:
        stmt = select(ExternalToken).where(ExternalToken.user_id == user_id)
        return cast(ExternalToken | None, self.session.execute(stmt).scalars().first())
