"""Persisted refresh-token records (opaque, single-use)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin


class RefreshToken(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    One live refresh credential.

    Rows are deleted on logout, on expiry detection, and on rotation; there is
    no "used" flag. ``user_id`` is a plain foreign key with no ORM relationship,
    so reading a token never triggers a hidden user load.
    """

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(String(64), nullable=False)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (UniqueConstraint("token", name="uq_refresh_tokens_token"),)
