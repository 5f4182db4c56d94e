"""Unit tests for the relational refresh-token and external-token stores."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from app.infra.sql import SQLExternalTokenStore, SQLRefreshTokenStore
from app.models.refresh_token import RefreshToken
from app.services._shared.ports import RefreshTokenRecord, RotationResult
from tests.factories.tokens import ExternalTokenFactory, RefreshTokenFactory
from tests.factories.user import UserFactory


def _record(token: str, user_id: int, *, ttl: timedelta = timedelta(days=7)):
    now = datetime.now(UTC)
    return RefreshTokenRecord(token=token, user_id=user_id, expires_at=now + ttl, created_at=now)


class TestSQLRefreshTokenStore:
    @pytest.fixture()
    def store(self):
        return SQLRefreshTokenStore()

    def test_save_then_find_returns_aware_datetimes(self, store):
        user = UserFactory()
        store.save(_record("tok-1", user.id))

        found = store.find("tok-1")
        assert found is not None
        assert found.user_id == user.id
        assert found.expires_at.tzinfo is not None
        assert not found.is_expired(datetime.now(UTC))

    def test_delete_reports_whether_a_row_was_removed(self, store):
        token = RefreshTokenFactory().token

        assert store.delete(token) is True
        assert store.delete(token) is False

    def test_rotate_replaces_row(self, store, session):
        row = RefreshTokenFactory()
        old_token = row.token
        replacement = _record("tok-new", row.user_id)

        res = store.rotate(old_token=old_token, replacement=replacement, now=datetime.now(UTC))

        assert res is RotationResult.OK
        tokens = {t for (t,) in session.query(RefreshToken.token).all()}
        assert "tok-new" in tokens
        assert old_token not in tokens

    def test_rotate_unknown_token(self, store):
        user = UserFactory()
        res = store.rotate(
            old_token="ghost", replacement=_record("x", user.id), now=datetime.now(UTC)
        )
        assert res is RotationResult.NOT_FOUND
        assert store.find("x") is None

    def test_rotate_expired_token_is_deleted(self, store):
        row = RefreshTokenFactory(expired=True)
        token = row.token

        res = store.rotate(
            old_token=token, replacement=_record("never", row.user_id), now=datetime.now(UTC)
        )

        assert res is RotationResult.EXPIRED
        assert store.find(token) is None
        assert store.find("never") is None

    def test_second_rotation_of_same_value_fails(self, store):
        row = RefreshTokenFactory()
        token, user_id = row.token, row.user_id
        now = datetime.now(UTC)

        assert store.rotate(old_token=token, replacement=_record("a", user_id), now=now) is (
            RotationResult.OK
        )
        assert store.rotate(old_token=token, replacement=_record("b", user_id), now=now) is (
            RotationResult.NOT_FOUND
        )

    def test_delete_all_for_user(self, store):
        user = UserFactory()
        other = RefreshTokenFactory()
        RefreshTokenFactory(user=user)
        RefreshTokenFactory(user=user)

        assert store.delete_all_for_user(user.id) == 2
        assert store.find(other.token) is not None


class TestSQLExternalTokenStore:
    @pytest.fixture()
    def store(self):
        return SQLExternalTokenStore()

    def test_get_for_unlinked_user(self, store):
        user = UserFactory()
        assert store.get_for_user(user.id) is None

    def test_upsert_creates_then_updates_single_row(self, store):
        user = UserFactory()
        expires = datetime.now(UTC) + timedelta(hours=1)

        first = store.upsert(
            user_id=user.id, access_token="a1", refresh_token="r1", expires_at=expires
        )
        second = store.upsert(user_id=user.id, access_token="a2", refresh_token=None, expires_at=None)

        assert first.access_token == "a1"
        assert second.access_token == "a2"
        # Missing refresh token on a repeat grant keeps the stored one.
        assert second.refresh_token == "r1"
        assert second.expires_at is None
        assert not second.is_expired(datetime.now(UTC))

    def test_update_access_token(self, store):
        row = ExternalTokenFactory()
        expires = datetime.now(UTC) + timedelta(hours=2)

        updated = store.update_access_token(
            user_id=row.user_id, access_token="fresh", expires_at=expires
        )

        assert updated is not None
        assert updated.access_token == "fresh"
        assert updated.refresh_token == row.refresh_token
        assert abs(updated.expires_at - expires) < timedelta(seconds=1)

    def test_update_access_token_for_unlinked_user(self, store):
        user = UserFactory()
        assert store.update_access_token(user_id=user.id, access_token="x", expires_at=None) is None
