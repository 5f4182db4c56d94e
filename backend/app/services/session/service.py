# app/services/session/service.py
"""
SessionService
==============

Credential lifecycle for first-party sessions:

- signup (no tokens issued)
- signin (access token + single-use refresh token)
- refresh (atomic rotation of the refresh token)
- logout (idempotent revocation)

Per refresh token the states are ``live → rotated-away | expired | revoked``;
a token never comes back once it has left ``live``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from app.models.user import Role, User
from app.repositories.user import UserRepository
from app.services._shared.base import BaseService, Clock
from app.services._shared.errors import (
    ConflictError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotFoundError,
    violates,
)
from app.services._shared.ports import (
    RefreshTokenRecord,
    RefreshTokenStore,
    RotationResult,
    TokenCodec,
)
from app.services.session.dto import (
    SessionConfig,
    SigninIn,
    SignupIn,
    TokenBundle,
    UserPublicOut,
)


@dataclass(frozen=True, slots=True)
class _Subject:
    """Token-relevant snapshot of a user, detached from the ORM session."""

    id: int
    email: str
    role: str

    @classmethod
    def of(cls, user: User) -> _Subject:
        return cls(id=user.id, email=user.email, role=Role(user.role).value)


class SessionService(BaseService):
    """
    Authentication lifecycle service (signup / signin / refresh / logout).

    Access tokens come from the injected :class:`TokenCodec`; refresh tokens
    are opaque values whose validity lives entirely in the injected
    :class:`RefreshTokenStore`.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        refresh_store: RefreshTokenStore,
        config: SessionConfig | None = None,
        logger: logging.Logger | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param codec: Adapter for issuing/verifying access tokens.
        :param refresh_store: Stateful store for refresh tokens (atomic rotation).
        :param config: Refresh-token lifetime.
        :param logger: Explicit logger (defaults to the module logger).
        :param clock: UTC clock, injectable for expiry tests.
        """
        super().__init__(logger=logger, clock=clock)
        self.codec = codec
        self.refresh_store = refresh_store
        self.cfg = config or SessionConfig()

    # ------------------------------------------------------------------ #
    # Signup
    # ------------------------------------------------------------------ #

    def signup(self, dto: SignupIn) -> UserPublicOut:
        """
        Register a new account with role ``USER``.

        :param dto: Signup input.
        :returns: Public projection of the new user.
        :raises ConflictError: If the email is already registered.
        """
        return self.signup_with_role(dto.email, dto.password, Role.USER)

    def signup_with_role(self, email: str, password: str, role: Role) -> UserPublicOut:
        """
        Register an account with an explicit ``role`` (admin tooling).

        :raises ConflictError: If the email is already registered.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email(email):
                raise ConflictError("User", "email already in use")

            try:
                user = repo.add(User(email=email, password=password, role=role))
            except IntegrityError as exc:
                # Concurrent signup with the same email lost the race at the constraint.
                if violates(exc, "uq_users_email") or violates(exc, "users.email"):
                    raise ConflictError("User", "email already in use") from exc
                raise

            out = self._public(user)

        self.log.info("User registered", extra={"user_id": out.id})
        return out

    # ------------------------------------------------------------------ #
    # Signin
    # ------------------------------------------------------------------ #

    def signin(self, dto: SigninIn) -> TokenBundle:
        """
        Verify credentials and issue a fresh token bundle.

        Unknown email and wrong password fail identically.

        :param dto: Signin input.
        :raises InvalidCredentialsError: If credentials do not match.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.authenticate(dto.email, dto.password)
            if user is None:
                self.log.warning("Sign-in rejected: invalid credentials")
                raise InvalidCredentialsError()
            subject = _Subject.of(user)

        bundle = self._issue(subject)
        self.log.info("Sign-in succeeded", extra={"user_id": subject.id})
        return bundle

    def issue_session(self, user_id: int) -> TokenBundle:
        """
        Issue an access token and a persisted refresh token for ``user_id``.

        Used by flows that authenticate the user by other means (e.g. the
        external login callback) so their sessions are refreshable too.

        :raises NotFoundError: If the user does not exist.
        """
        return self._issue(self._load_subject(user_id))

    # ------------------------------------------------------------------ #
    # Refresh with atomic rotation
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str) -> TokenBundle:
        """
        Rotate a refresh token and emit a new token bundle.

        - Unknown (or already rotated/revoked) value → :class:`InvalidTokenError`.
        - Expired value → record deleted, then :class:`ExpiredTokenError`.
        - Otherwise the presented record is deleted and its replacement stored
          in one transaction; the old value is dead even if the response is lost.
        """
        now = self.now_utc()
        record = self.refresh_store.find(refresh_token)
        if record is None:
            self.log.info("Refresh rejected: unknown token")
            raise InvalidTokenError()

        if record.is_expired(now):
            self.refresh_store.delete(refresh_token)
            self.log.info("Refresh rejected: expired token", extra={"user_id": record.user_id})
            raise ExpiredTokenError()

        try:
            subject = self._load_subject(record.user_id)
        except NotFoundError as exc:
            self.refresh_store.delete(refresh_token)
            raise InvalidTokenError() from exc

        replacement = self._new_record(subject.id)
        outcome = self.refresh_store.rotate(
            old_token=refresh_token, replacement=replacement, now=now
        )
        if outcome is RotationResult.EXPIRED:
            raise ExpiredTokenError()
        if outcome is not RotationResult.OK:
            # A concurrent refresh consumed the same value first.
            self.log.warning(
                "Refresh rejected: token consumed concurrently", extra={"user_id": subject.id}
            )
            raise InvalidTokenError()

        access = self.codec.issue_access_token(
            user_id=subject.id, email=subject.email, role=subject.role
        )
        return TokenBundle(access_token=access, refresh_token=replacement.token)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, refresh_token: str) -> None:
        """Revoke ``refresh_token`` if it exists. Absence is not an error."""
        removed = self.refresh_store.delete(refresh_token)
        self.log.info("Logout", extra={"token_status": "revoked" if removed else "absent"})

    # ------------------------------------------------------------------ #
    # Current user / password
    # ------------------------------------------------------------------ #

    def get_current_user(self, user_id: int) -> UserPublicOut:
        """
        Return the public projection of ``user_id``.

        :raises NotFoundError: If the user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return self._public(user)

    def update_password(self, user_id: int, new_password: str) -> None:
        """
        Re-hash and persist a new password.

        Existing refresh tokens stay valid.

        :raises NotFoundError: If the user does not exist.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            if repo.update_password(user_id, new_password) is None:
                raise NotFoundError("User", user_id)
        self.log.info("Password updated", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _issue(self, subject: _Subject) -> TokenBundle:
        # Persist the refresh record FIRST, then hand out tokens.
        record = self._new_record(subject.id)
        self.refresh_store.save(record)
        access = self.codec.issue_access_token(
            user_id=subject.id, email=subject.email, role=subject.role
        )
        return TokenBundle(access_token=access, refresh_token=record.token)

    def _new_record(self, user_id: int) -> RefreshTokenRecord:
        now = self.now_utc()
        return RefreshTokenRecord(
            token=self.codec.new_refresh_token(),
            user_id=user_id,
            expires_at=now + self.cfg.refresh_ttl,
            created_at=now,
        )

    def _load_subject(self, user_id: int) -> _Subject:
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return _Subject.of(user)

    @staticmethod
    def _public(user: User) -> UserPublicOut:
        return UserPublicOut(id=user.id, email=user.email, role=Role(user.role).value)
