"""DTOs for QuizService."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class QuizSubmitIn:
    """
    One finished quiz as reported by the client.

    :param score: Points obtained (non-negative).
    :param max_score: Points available; ``None`` means the quiz was scored out of ``score``.
    :param topic: Free-text topic; blank becomes ``"Unknown"``.
    """

    score: int
    max_score: int | None = None
    topic: str | None = None


@dataclass(frozen=True, slots=True)
class QuizResultOut:
    id: int
    topic: str
    score: int
    max_score: int
    percentage: float
    created_at: datetime
