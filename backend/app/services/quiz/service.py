"""
QuizService
===========

Stores quiz scores per user and lists the ones recorded on a given day.
Day boundaries are UTC midnights.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta

from app.models.base import as_utc
from app.models.quiz_result import QuizResult
from app.services._shared.base import BaseService
from app.services.quiz.dto import QuizResultOut, QuizSubmitIn


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Return ``[start, end)`` of ``day`` in UTC."""
    start = datetime.combine(day, time.min, tzinfo=UTC)
    return start, start + timedelta(days=1)


class QuizService(BaseService):
    def submit(self, user_id: int, dto: QuizSubmitIn) -> QuizResultOut:
        """Persist one result for ``user_id``; ``created_at`` comes from the service clock."""
        result = QuizResult.record(
            user_id=user_id, score=dto.score, max_score=dto.max_score, topic=dto.topic
        )
        result.created_at = self.now_utc()
        with self.rw_uow() as uow:
            uow.quiz_results.add(result)
            out = self._to_out(result)
        self.log.info(
            "Quiz result saved: %s %s/%s",
            out.topic,
            out.score,
            out.max_score,
            extra={"user_id": user_id},
        )
        return out

    def daily(self, user_id: int, day: date | None = None) -> list[QuizResultOut]:
        """Results of ``user_id`` for ``day`` (today, UTC, when omitted), newest first."""
        start, end = day_bounds(day or self.now_utc().date())
        with self.ro_uow() as uow:
            rows = uow.quiz_results.list_for_user_between(user_id, start, end)
            return [self._to_out(row) for row in rows]

    @staticmethod
    def _to_out(row: QuizResult) -> QuizResultOut:
        return QuizResultOut(
            id=row.id,
            topic=row.topic,
            score=row.score,
            max_score=row.max_score,
            percentage=row.percentage,
            created_at=as_utc(row.created_at),
        )
