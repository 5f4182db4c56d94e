"""Signing-key derivation for access tokens."""

from __future__ import annotations

import logging
from typing import Final

from app.services._shared.errors import ConfigurationError

log = logging.getLogger(__name__)

# HS512 wants at least 512 bits of key material.
MIN_KEY_BYTES: Final[int] = 64
PAD_CHAR: Final[str] = "x"


def derive_signing_key(secret: str, *, allow_padding: bool) -> str:
    """
    Return the HMAC key used to sign access tokens.

    Secrets shorter than :data:`MIN_KEY_BYTES` are right-padded with
    :data:`PAD_CHAR` when ``allow_padding`` is set. The padding is
    deterministic, so every process sharing the secret derives the same key.

    :param secret: Configured raw secret.
    :param allow_padding: Pad undersized secrets instead of refusing them.
    :returns: Key material of at least :data:`MIN_KEY_BYTES` bytes.
    :raises ConfigurationError: If the secret is blank, or undersized while
        padding is disallowed.
    """
    if not secret or not secret.strip():
        raise ConfigurationError("JWT_SECRET_KEY is not configured.")

    size = len(secret.encode("utf-8"))
    if size >= MIN_KEY_BYTES:
        return secret

    if not allow_padding:
        raise ConfigurationError(
            f"JWT_SECRET_KEY is {size} bytes; at least {MIN_KEY_BYTES} bytes are required. "
            "Generate one with `python -c 'import secrets; print(secrets.token_urlsafe(64))'`."
        )

    log.warning(
        "JWT secret shorter than %s bytes; padding it (non-production use only).", MIN_KEY_BYTES
    )
    return secret + PAD_CHAR * (MIN_KEY_BYTES - size)
