"""Unit tests for the service graph accessors."""

from __future__ import annotations

import traceback

import pytest
from app.container import Services
from app.services._shared.errors import ConfigurationError
from app.services._shared.ports import (
    InMemoryExternalTokenStore,
    InMemoryRefreshTokenStore,
    StubTokenCodec,
)
from app.services.quiz.service import QuizService
from app.services.session.service import SessionService


@pytest.fixture()
def unconfigured() -> Services:
    codec = StubTokenCodec()
    refresh_store = InMemoryRefreshTokenStore()
    return Services(
        codec=codec,
        refresh_store=refresh_store,
        external_store=InMemoryExternalTokenStore(),
        sessions=SessionService(codec=codec, refresh_store=refresh_store),
        quiz=QuizService(),
        external_error="GOOGLE_CLIENT_ID is not configured",
    )


@pytest.mark.parametrize("accessor", ["require_external_auth", "require_calendar"])
def test_each_call_raises_a_fresh_error(unconfigured, accessor):
    raised = []
    for _ in range(5):
        with pytest.raises(ConfigurationError, match="GOOGLE_CLIENT_ID") as exc_info:
            getattr(unconfigured, accessor)()
        raised.append(exc_info.value)

    assert len({id(err) for err in raised}) == len(raised)
    depths = {len(traceback.extract_tb(err.__traceback__)) for err in raised}
    assert len(depths) == 1


def test_default_message_without_startup_error(unconfigured):
    unconfigured.external_error = None

    with pytest.raises(ConfigurationError, match="not configured"):
        unconfigured.require_external_auth()
