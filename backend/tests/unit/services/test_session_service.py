"""Unit tests for SessionService (in-memory refresh store, stub codec)."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest
from app.models.user import Role, User
from app.services._shared.errors import (
    ConflictError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
)
from app.services._shared.ports import InMemoryRefreshTokenStore, StubTokenCodec
from app.services.session.dto import SessionConfig, SigninIn, SignupIn
from app.services.session.service import SessionService, _Subject
from tests.factories.user import UserFactory
from tests.helpers.utils import MutableClock, not_raises


@pytest.fixture()
def clock():
    return MutableClock()


@pytest.fixture()
def store():
    return InMemoryRefreshTokenStore()


@pytest.fixture()
def codec():
    return StubTokenCodec()


@pytest.fixture()
def service(codec, store, clock):
    return SessionService(
        codec=codec,
        refresh_store=store,
        config=SessionConfig(refresh_ttl=timedelta(days=7)),
        clock=clock,
    )


class TestSignup:
    def test_creates_user_with_role_user_and_no_tokens(self, service, store, session):
        out = service.signup(SignupIn(email="A@X.com", password="secret1"))

        assert out.email == "a@x.com"
        assert out.role == "USER"
        assert len(store) == 0
        user = session.get(User, out.id)
        assert user.verify_password("secret1")
        assert user.password_hash != "secret1"

    def test_duplicate_email_conflicts(self, service):
        UserFactory(email="dup@x.com")

        with pytest.raises(ConflictError):
            service.signup(SignupIn(email="dup@x.com", password="secret1"))

    def test_signup_with_role(self, service):
        out = service.signup_with_role("root@x.com", "secret1", Role.ADMIN)
        assert out.role == "ADMIN"


class TestSignin:
    def test_issues_bundle_and_persists_refresh_record(self, service, store, codec):
        user = UserFactory(email="a@x.com", password="secret1")

        bundle = service.signin(SigninIn(email="a@x.com", password="secret1"))

        assert bundle.token_type == "Bearer"
        assert bundle.expires_in == 900
        assert store.find(bundle.refresh_token).user_id == user.id
        claims = codec.verify(bundle.access_token)
        assert claims.user_id == user.id
        assert claims.role == "USER"

    @pytest.mark.parametrize(
        "email,password",
        [("a@x.com", "wrong-pass"), ("nobody@x.com", "secret1")],
    )
    def test_bad_credentials_are_indistinguishable(self, service, store, email, password):
        UserFactory(email="a@x.com", password="secret1")

        with pytest.raises(InvalidCredentialsError) as exc_info:
            service.signin(SigninIn(email=email, password=password))

        assert str(exc_info.value) == "Invalid email or password"
        assert len(store) == 0


class TestRefresh:
    def _signin(self, service):
        UserFactory(email="a@x.com", password="secret1")
        return service.signin(SigninIn(email="a@x.com", password="secret1"))

    def test_rotates_refresh_token(self, service, store):
        first = self._signin(service)

        second = service.refresh(first.refresh_token)

        assert second.refresh_token != first.refresh_token
        assert store.find(first.refresh_token) is None
        assert store.find(second.refresh_token) is not None

    def test_refresh_token_is_single_use(self, service):
        first = self._signin(service)
        service.refresh(first.refresh_token)

        with pytest.raises(InvalidTokenError):
            service.refresh(first.refresh_token)

    def test_unknown_token(self, service):
        with pytest.raises(InvalidTokenError):
            service.refresh("does-not-exist")

    def test_expired_token_is_deleted(self, service, store, clock):
        first = self._signin(service)
        clock.advance(days=7, seconds=1)

        with pytest.raises(ExpiredTokenError):
            service.refresh(first.refresh_token)
        assert store.find(first.refresh_token) is None
        # Second attempt now sees an unknown token.
        with pytest.raises(InvalidTokenError):
            service.refresh(first.refresh_token)

    def test_token_of_deleted_user_is_invalid(self, service, store, session):
        first = self._signin(service)
        record = store.find(first.refresh_token)
        session.delete(session.get(User, record.user_id))
        session.flush()

        with pytest.raises(InvalidTokenError):
            service.refresh(first.refresh_token)
        assert store.find(first.refresh_token) is None

    def test_concurrent_refresh_has_exactly_one_winner(self, service, store, monkeypatch):
        """Threads racing on one value: one bundle, every other caller rejected."""
        subject = _Subject(id=99, email="race@x.com", role="USER")
        # Keep worker threads off the test database session.
        monkeypatch.setattr(service, "_load_subject", lambda user_id: subject)
        bundle = service._issue(subject)

        workers = 8
        barrier = threading.Barrier(workers)
        rotate = store.rotate

        def rotate_together(**kwargs):
            barrier.wait(timeout=5)
            return rotate(**kwargs)

        monkeypatch.setattr(store, "rotate", rotate_together)

        def attempt(_):
            try:
                return service.refresh(bundle.refresh_token)
            except InvalidTokenError:
                return None

        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(attempt, range(workers)))

        winners = [o for o in outcomes if o is not None]
        assert len(winners) == 1
        assert store.find(bundle.refresh_token) is None
        assert store.find(winners[0].refresh_token) is not None
        assert len(store) == 1


class TestLogout:
    def test_revokes_token(self, service, store):
        UserFactory(email="a@x.com", password="secret1")
        bundle = service.signin(SigninIn(email="a@x.com", password="secret1"))

        service.logout(bundle.refresh_token)

        assert store.find(bundle.refresh_token) is None
        with pytest.raises(InvalidTokenError):
            service.refresh(bundle.refresh_token)

    def test_is_idempotent(self, service):
        with not_raises(Exception):
            service.logout("never-issued")
            service.logout("never-issued")


class TestProfile:
    def test_get_current_user(self, service):
        user = UserFactory(email="me@x.com")
        out = service.get_current_user(user.id)
        assert (out.id, out.email, out.role) == (user.id, "me@x.com", "USER")

    def test_get_current_user_missing(self, service):
        with pytest.raises(NotFoundError):
            service.get_current_user(987654)

    def test_update_password_keeps_sessions(self, service, store):
        UserFactory(email="a@x.com", password="secret1")
        bundle = service.signin(SigninIn(email="a@x.com", password="secret1"))
        user_id = store.find(bundle.refresh_token).user_id

        service.update_password(user_id, "secret2")

        assert service.signin(SigninIn(email="a@x.com", password="secret2"))
        with pytest.raises(InvalidCredentialsError):
            service.signin(SigninIn(email="a@x.com", password="secret1"))
        assert store.find(bundle.refresh_token) is not None

    def test_update_password_unknown_user(self, service):
        with pytest.raises(NotFoundError):
            service.update_password(987654, "secret2")
