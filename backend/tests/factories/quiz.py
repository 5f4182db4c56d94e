"""Factory Boy definition for :class:`app.models.quiz_result.QuizResult`."""

from __future__ import annotations

from datetime import UTC, datetime

from app.models.quiz_result import QuizResult, score_percentage

import factory
from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class QuizResultFactory(BaseFactory):
    class Meta:
        model = QuizResult
        exclude = ("user",)

    id = None
    user = factory.SubFactory(UserFactory)
    user_id = factory.SelfAttribute("user.id")
    topic = factory.Faker("word")
    score = 7
    max_score = 10
    percentage = factory.LazyAttribute(lambda o: score_percentage(o.score, o.max_score))
    created_at = factory.LazyFunction(lambda: datetime.now(UTC))
