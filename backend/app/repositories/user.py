"""Persistence for :class:`app.models.user.User` (no tokens, no commits)."""

from __future__ import annotations

from typing import cast

from sqlalchemy import exists, select

from app.models.user import User
from app.repositories.base import BaseRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Look users up by email and manage their password hash.

    Emails are stored lower-cased, so every lookup normalizes its input the
    same way before querying.
    """

    model = User

    def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == normalize_email(email))
        return cast(User | None, self.session.scalars(stmt).first())

    def exists_by_email(self, email: str) -> bool:
        stmt = select(exists().where(User.email == normalize_email(email)))
        return bool(self.session.scalar(stmt))

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user only when ``password`` matches.

        An unknown email and a wrong password are indistinguishable to the caller.
        """
        user = self.get_by_email(email)
        if user is not None and user.verify_password(password):
            return user
        return None

    def update_password(self, user_id: int, new_password: str) -> User | None:
        """Re-hash the password of ``user_id``; ``None`` when the user is gone."""
        user = self.get(user_id)
        if user is None:
            return None
        user.password = new_password
        self.flush()
        return user
