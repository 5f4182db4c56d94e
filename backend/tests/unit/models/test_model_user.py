"""Tests for the User model."""

from __future__ import annotations

import pytest
from app.models.user import Role, User
from sqlalchemy.exc import IntegrityError


class TestUser:
    def test_password_hashing(self, session):
        u = User(email="Test@Example.com")
        u.password = "secret123"
        session.add(u)
        session.commit()
        assert u.verify_password("secret123") is True
        assert u.verify_password("wrong") is False

    def test_password_is_write_only(self):
        u = User(email="a@example.com")
        u.password = "x"
        with pytest.raises(AttributeError):
            _ = u.password

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            User(email="a@example.com").password = ""

    def test_email_normalized_and_unique(self, session):
        u1 = User(email="Alice@Example.com", password="pw")
        session.add(u1)
        session.commit()
        assert u1.email == "alice@example.com"

        session.add(User(email="alice@example.com", password="pw"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_role_defaults_to_user(self, session):
        u = User(email="r@example.com", password="pw")
        session.add(u)
        session.flush()
        assert u.role is Role.USER
        assert Role.ADMIN.authority == "ROLE_ADMIN"

    @pytest.mark.parametrize("email", ["", "no-at-sign", "x@nodot"])
    def test_malformed_email_rejected(self, email):
        with pytest.raises(ValueError):
            User(email=email)
