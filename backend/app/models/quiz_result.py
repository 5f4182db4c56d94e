"""Recorded quiz attempts."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin

DEFAULT_TOPIC = "Unknown"


def score_percentage(score: int, max_score: int) -> float:
    """``score / max_score`` as a percentage; ``0.0`` when ``max_score`` is not positive."""
    if max_score <= 0:
        return 0.0
    return score / max_score * 100


class QuizResult(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    One submitted quiz score.

    ``percentage`` is computed once on creation and stored with the row.
    """

    __tablename__ = "quiz_results"

    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    topic: Mapped[str] = mapped_column(String(200), nullable=False, default=DEFAULT_TOPIC)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    max_score: Mapped[int] = mapped_column(Integer, nullable=False)
    percentage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    __table_args__ = (
        CheckConstraint("score >= 0", name="score_non_negative"),
        CheckConstraint("max_score >= 0", name="max_score_non_negative"),
        Index("ix_quiz_results_user_id_created_at", "user_id", "created_at"),
    )

    @classmethod
    def record(
        cls, *, user_id: int, score: int, max_score: int | None = None, topic: str | None = None
    ) -> QuizResult:
        """Build a result; ``max_score`` falls back to ``score`` and a blank topic to ``Unknown``."""
        resolved_max = score if max_score is None else max_score
        return cls(
            user_id=user_id,
            topic=(topic or "").strip() or DEFAULT_TOPIC,
            score=score,
            max_score=resolved_max,
            percentage=score_percentage(score, resolved_max),
        )
