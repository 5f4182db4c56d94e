# app/infra/jwt/flask_jwt_token_codec.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, cast
from uuid import uuid4

import jwt as pyjwt
from flask_jwt_extended.exceptions import JWTExtendedException

from app.services._shared.ports import AccessClaims, TokenCodec, TokenStatus


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    Adapter for Flask-JWT-Extended.

    Signing key, algorithm (``HS512``) and TTL are read from the app config
    prepared by :func:`app.core.extensions.init_app`.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def issue_access_token(self, *, user_id: int, email: str, role: str) -> str:
        from flask_jwt_extended import create_access_token as _create_access

        # PyJWT rejects non-string subjects, so the id travels as text.
        return cast(
            str,
            _create_access(
                identity=str(user_id),
                additional_claims={"email": email, "role": role},
            ),
        )

    def inspect(self, token: str) -> tuple[TokenStatus, AccessClaims | None]:
        from flask_jwt_extended import decode_token

        try:
            raw = cast(dict[str, Any], decode_token(token))
        except pyjwt.ExpiredSignatureError:
            status = TokenStatus.EXPIRED
        except pyjwt.InvalidSignatureError:
            status = TokenStatus.BAD_SIGNATURE
        except pyjwt.DecodeError:
            status = TokenStatus.MALFORMED
        except (pyjwt.InvalidTokenError, JWTExtendedException):
            status = TokenStatus.INVALID
        else:
            claims = self._claims_from(raw)
            status = TokenStatus.VALID if claims else TokenStatus.INVALID
            if claims:
                return status, claims

        self.logger.info(
            "Access token rejected: %s", status.value, extra={"token_status": status.value}
        )
        return status, None

    def verify(self, token: str) -> AccessClaims | None:
        return self.inspect(token)[1]

    def new_refresh_token(self) -> str:
        return str(uuid4())

    @staticmethod
    def _claims_from(raw: dict[str, Any]) -> AccessClaims | None:
        # Flask-JWT-Extended sets "type": "access" | "refresh"
        if raw.get("type") != "access":
            return None
        try:
            return AccessClaims(
                user_id=int(raw["sub"]),
                email=str(raw["email"]),
                role=str(raw["role"]),
                issued_at=datetime.fromtimestamp(int(raw["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(raw["exp"]), tz=UTC),
            )
        except (KeyError, TypeError, ValueError):
            return None
