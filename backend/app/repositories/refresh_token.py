"""Refresh-token repository (persistence only)."""

from __future__ import annotations

from typing import cast

from sqlalchemy import delete, select
from sqlalchemy.engine import CursorResult

from app.models.refresh_token import RefreshToken
from app.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only repository for :class:`RefreshToken`."""

    model = RefreshToken

    def get_by_token(self, token: str) -> RefreshToken | None:
        """Fetch a record by its opaque token value."""
        stmt = select(RefreshToken).where(RefreshToken.token == token)
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def delete_by_token(self, token: str) -> int:
        """
        Delete a record by token value with a single ``DELETE`` statement.

        The returned row count is what makes rotation a compare-and-delete:
        of two concurrent callers only one sees ``1``.

        :returns: Number of rows removed (0 or 1).
        """
        stmt = delete(RefreshToken).where(RefreshToken.token == token)
        result = cast(CursorResult, self.session.execute(stmt))
        return int(result.rowcount or 0)

    def delete_for_user(self, user_id: int) -> int:
        """Delete every record owned by ``user_id``. :returns: rows removed."""
        stmt = delete(RefreshToken).where(RefreshToken.user_id == user_id)
        result = cast(CursorResult, self.session.execute(stmt))
        return int(result.rowcount or 0)
