"""Factory Boy definitions for the token tables."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

from app.models.external_token import ExternalToken
from app.models.refresh_token import RefreshToken

import factory
from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class RefreshTokenFactory(BaseFactory):
    class Meta:
        model = RefreshToken
        exclude = ("user",)

    id = None
    token = factory.LazyFunction(lambda: str(uuid.uuid4()))
    user = factory.SubFactory(UserFactory)
    user_id = factory.SelfAttribute("user.id")
    created_at = factory.LazyFunction(lambda: datetime.now(UTC))
    expires_at = factory.LazyAttribute(lambda o: o.created_at + timedelta(days=7))

    class Params:
        expired = factory.Trait(
            expires_at=factory.LazyAttribute(lambda o: o.created_at - timedelta(seconds=1))
        )


class ExternalTokenFactory(BaseFactory):
    """Linked provider account; access token valid for one hour by default."""

    class Meta:
        model = ExternalToken
        exclude = ("user",)

    id = None
    user = factory.SubFactory(UserFactory)
    user_id = factory.SelfAttribute("user.id")
    access_token = factory.Sequence(lambda n: f"ya29.access-{n}")
    refresh_token = factory.Sequence(lambda n: f"1//refresh-{n}")
    expires_at = factory.LazyFunction(lambda: datetime.now(UTC) + timedelta(hours=1))
