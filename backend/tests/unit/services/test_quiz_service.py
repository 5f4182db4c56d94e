"""Unit tests for QuizService."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest
from app.models.quiz_result import QuizResult
from app.services.quiz.dto import QuizSubmitIn
from app.services.quiz.service import QuizService, day_bounds
from tests.factories.quiz import QuizResultFactory
from tests.factories.user import UserFactory
from tests.helpers.utils import MutableClock


@pytest.fixture()
def clock():
    return MutableClock(datetime(2030, 6, 1, 9, 30, tzinfo=UTC))


@pytest.fixture()
def service(clock):
    return QuizService(clock=clock)


def test_day_bounds_are_utc_midnights():
    start, end = day_bounds(date(2030, 6, 1))

    assert start == datetime(2030, 6, 1, tzinfo=UTC)
    assert end == datetime(2030, 6, 2, tzinfo=UTC)


def test_submit_persists_with_service_time(service, clock, session):
    user = UserFactory()

    out = service.submit(user.id, QuizSubmitIn(score=8, max_score=10, topic="Verbs"))

    assert (out.topic, out.score, out.max_score) == ("Verbs", 8, 10)
    assert out.percentage == pytest.approx(80.0)
    assert out.created_at == clock.now
    row = session.get(QuizResult, out.id)
    assert row.user_id == user.id


def test_submit_without_max_score_or_topic(service):
    user = UserFactory()

    out = service.submit(user.id, QuizSubmitIn(score=5))

    assert (out.topic, out.max_score, out.percentage) == ("Unknown", 5, 100.0)


def test_daily_defaults_to_today_and_orders_newest_first(service, clock):
    user = UserFactory()
    first = service.submit(user.id, QuizSubmitIn(score=1, max_score=2))
    clock.advance(hours=1)
    second = service.submit(user.id, QuizSubmitIn(score=2, max_score=2))
    QuizResultFactory(user=user, created_at=datetime(2030, 5, 31, 22, tzinfo=UTC))

    results = service.daily(user.id)

    assert [r.id for r in results] == [second.id, first.id]
    assert all(r.created_at.tzinfo is not None for r in results)


def test_daily_for_explicit_date_is_per_user(service):
    user = UserFactory()
    other = UserFactory()
    mine = QuizResultFactory(user=user, created_at=datetime(2030, 5, 20, 8, tzinfo=UTC))
    QuizResultFactory(user=other, created_at=datetime(2030, 5, 20, 8, tzinfo=UTC))

    assert [r.id for r in service.daily(user.id, date(2030, 5, 20))] == [mine.id]
    assert service.daily(user.id, date(2030, 5, 21)) == []
