"""Quiz-result repository (persistence only)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select

from app.models.quiz_result import QuizResult
from app.repositories.base import BaseRepository


class QuizResultRepository(BaseRepository[QuizResult]):
    model = QuizResult

    def list_for_user_between(
        self, user_id: int, start: datetime, end: datetime
    ) -> list[QuizResult]:
        """Results of ``user_id`` created in ``[start, end)``, newest first."""
        stmt = (
            select(QuizResult)
            .where(
                QuizResult.user_id == user_id,
                QuizResult.created_at >= start,
                QuizResult.created_at < end,
            )
            .order_by(QuizResult.created_at.desc(), QuizResult.id.desc())
        )
        return list(self.session.scalars(stmt))

