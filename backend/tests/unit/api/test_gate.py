"""Unit tests for the request authentication gate."""

from __future__ import annotations

import pytest
from app.api.gate import ANONYMOUS, AuthenticationGate, Identity, extract_bearer, load_identity
from app.services._shared.ports import StubTokenCodec
from tests.factories.user import AdminFactory, UserFactory


@pytest.fixture()
def codec():
    return StubTokenCodec()


def _identity(user_id: int) -> Identity:
    return Identity(
        user_id=user_id, email="a@x.com", role="USER", authorities=("ROLE_USER",)
    )


@pytest.mark.parametrize(
    "header,expected",
    [
        (None, None),
        ("", None),
        ("Basic abc", None),
        ("Bearer", None),
        ("Bearer    ", None),
        ("Bearer tok", "tok"),
        ("bearer tok", "tok"),
    ],
)
def test_extract_bearer(header, expected):
    assert extract_bearer(header) == expected


def test_valid_token_yields_identity(codec):
    gate = AuthenticationGate(codec=codec, subject_loader=_identity)
    token = codec.issue_access_token(user_id=7, email="a@x.com", role="USER")

    identity = gate.authenticate(f"Bearer {token}")

    assert identity.is_authenticated
    assert identity.user_id == 7
    assert identity.authorities == ("ROLE_USER",)


@pytest.mark.parametrize("header", [None, "Bearer unknown-token", "Token abc"])
def test_missing_or_bad_token_is_anonymous(codec, header):
    gate = AuthenticationGate(codec=codec, subject_loader=_identity)

    identity = gate.authenticate(header)

    assert identity is ANONYMOUS
    assert not identity.is_authenticated


def test_unknown_subject_is_anonymous(codec):
    gate = AuthenticationGate(codec=codec, subject_loader=lambda user_id: None)
    token = codec.issue_access_token(user_id=7, email="a@x.com", role="USER")

    assert gate.authenticate(f"Bearer {token}") is ANONYMOUS


def test_loader_failure_never_propagates(codec, caplog):
    def broken(user_id):
        raise RuntimeError("database down")

    gate = AuthenticationGate(codec=codec, subject_loader=broken)
    token = codec.issue_access_token(user_id=7, email="a@x.com", role="USER")

    assert gate.authenticate(f"Bearer {token}") is ANONYMOUS
    assert "treating request as anonymous" in caplog.text


class TestLoadIdentity:
    def test_user_gets_single_role_authority(self):
        user = UserFactory(email="u@x.com", name="U")

        identity = load_identity(user.id)

        assert identity.user_id == user.id
        assert identity.email == "u@x.com"
        assert identity.role == "USER"
        assert identity.authorities == ("ROLE_USER",)

    def test_admin_authority(self):
        admin = AdminFactory()
        assert load_identity(admin.id).authorities == ("ROLE_ADMIN",)

    def test_missing_user(self):
        assert load_identity(424242) is None
