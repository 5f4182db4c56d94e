"""Request-time authentication.

The gate runs before every request, resolves an ``Authorization: Bearer``
header into an :class:`Identity` and stores it on ``flask.g``. It never
rejects a request: any failure leaves the request anonymous and is logged.
Enforcement is left to route-level decorators (:func:`app.api.deps.require_auth`).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from flask import Flask, g, request

from app.models.user import Role
from app.services._shared.ports import TokenCodec
from app.uow import SQLAlchemyReadOnlyUnitOfWork

BEARER_PREFIX = "bearer "


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Request-scoped principal.

    :ivar user_id: Authenticated user id (``None`` when anonymous).
    :ivar authorities: Single ``ROLE_<ROLE>`` authority, empty when anonymous.
    """

    user_id: int | None = None
    email: str | None = None
    name: str | None = None
    role: str | None = None
    authorities: tuple[str, ...] = ()

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = Identity()

SubjectLoader = Callable[[int], Identity | None]


def load_identity(user_id: int) -> Identity | None:
    """Resolve ``user_id`` to an :class:`Identity` through a read-only UoW."""
    with SQLAlchemyReadOnlyUnitOfWork() as uow:
        user = uow.users.get(user_id)
        if user is None:
            return None
        role = Role(user.role)
        return Identity(
            user_id=user.id,
            email=user.email,
            name=user.name,
            role=role.value,
            authorities=(role.authority,),
        )


def extract_bearer(header: str | None) -> str | None:
    """Return the token of a well-formed ``Bearer`` header, else ``None``."""
    if not header or not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :].strip()
    return token or None


class AuthenticationGate:
    """Turn a bearer token into a request identity, failing open to anonymous."""

    def __init__(
        self,
        *,
        codec: TokenCodec,
        subject_loader: SubjectLoader = load_identity,
        logger: logging.Logger | None = None,
    ) -> None:
        self.codec = codec
        self.subject_loader = subject_loader
        self.log = logger or logging.getLogger(__name__)

    def authenticate(self, authorization: str | None) -> Identity:
        """
        Resolve an ``Authorization`` header value.

        Missing or malformed header, failed verification, unknown subject or
        any unexpected error all yield :data:`ANONYMOUS`.
        """
        token = extract_bearer(authorization)
        if token is None:
            return ANONYMOUS
        try:
            claims = self.codec.verify(token)
            if claims is None:
                return ANONYMOUS
            identity = self.subject_loader(claims.user_id)
            if identity is None:
                self.log.warning(
                    "Token subject not found; treating request as anonymous",
                    extra={"token_status": "unknown_subject"},
                )
                return ANONYMOUS
            return identity
        except Exception:
            # The gate must never abort the pipeline; route decorators enforce auth.
            self.log.exception("Authentication failed; treating request as anonymous")
            return ANONYMOUS

    def init_app(self, app: Flask) -> None:
        """Install the gate as a ``before_request`` hook."""

        @app.before_request
        def _authenticate_request() -> None:
            g.identity = self.authenticate(request.headers.get("Authorization"))


def current_identity() -> Identity:
    """Identity of the current request (anonymous outside the gate)."""
    return getattr(g, "identity", ANONYMOUS)
