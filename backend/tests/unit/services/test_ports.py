"""Contract tests for the in-memory port implementations."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from app.services._shared.ports import (
    ExternalTokenRecord,
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RotationResult,
    StubTokenCodec,
    TokenStatus,
)

NOW = datetime(2030, 1, 1, tzinfo=UTC)


def _rt(token: str, *, user_id: int = 1, ttl: timedelta = timedelta(days=1)):
    return RefreshTokenRecord(token=token, user_id=user_id, expires_at=NOW + ttl, created_at=NOW)


def test_refresh_record_expiry_boundary():
    record = _rt("t", ttl=timedelta(seconds=10))
    assert not record.is_expired(NOW + timedelta(seconds=9))
    assert record.is_expired(NOW + timedelta(seconds=10))


def test_external_record_without_expiry_never_expires():
    record = ExternalTokenRecord(
        user_id=1, access_token="a", refresh_token=None, expires_at=None, updated_at=NOW
    )
    assert not record.is_expired(NOW + timedelta(days=3650))


def test_in_memory_rotation_outcomes():
    store = InMemoryRefreshTokenStore()
    store.save(_rt("live"))
    store.save(_rt("stale", ttl=timedelta(seconds=-1)))

    assert store.rotate(old_token="live", replacement=_rt("next"), now=NOW) is RotationResult.OK
    assert store.rotate(old_token="live", replacement=_rt("x"), now=NOW) is (
        RotationResult.NOT_FOUND
    )
    assert store.rotate(old_token="stale", replacement=_rt("y"), now=NOW) is (
        RotationResult.EXPIRED
    )
    assert store.find("stale") is None
    assert store.find("y") is None
    assert len(store) == 1


def test_in_memory_delete_all_for_user():
    store = InMemoryRefreshTokenStore()
    store.save(_rt("a", user_id=1))
    store.save(_rt("b", user_id=1))
    store.save(_rt("c", user_id=2))

    assert store.delete_all_for_user(1) == 2
    assert store.find("c") is not None


def test_stub_codec_statuses():
    codec = StubTokenCodec(ttl=timedelta(seconds=-1))
    token = codec.issue_access_token(user_id=1, email="a@x.com", role="USER")

    assert codec.inspect(token) == (TokenStatus.EXPIRED, None)
    assert codec.inspect("nonsense") == (TokenStatus.MALFORMED, None)
