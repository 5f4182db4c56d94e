"""External (OAuth provider) credentials stored on the user's behalf."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class ExternalToken(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    At most one row per user (upsert semantics).

    Fields
    ------
    access_token : str
        Latest provider access token.
    refresh_token : str | None
        Provider refresh token; kept when a later grant omits it.
    expires_at : datetime | None
        Access-token expiry; ``None`` means "unknown, treat as valid".
    """

    __tablename__ = "external_tokens"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (UniqueConstraint("user_id", name="uq_external_tokens_user_id"),)
