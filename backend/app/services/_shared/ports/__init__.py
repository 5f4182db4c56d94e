"""
app.services._shared.ports
==========================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token management and credential storage.

These ports decouple the service layer from concrete implementations
of token signing and of refresh/external token persistence.

Modules
-------
- :mod:`token_codec`:
    Defines :class:`~.TokenCodec` — access-token issuing/verification and
    opaque refresh-token minting.

- :mod:`refresh_token_store`:
    Defines :class:`~.RefreshTokenStore`, :class:`~.RotationResult`
    and :class:`~.RefreshTokenRecord` — single-use refresh-token persistence
    with compare-and-delete rotation.

- :mod:`external_token_store`:
    Defines :class:`~.ExternalTokenStore` and :class:`~.ExternalTokenRecord`
    — one provider credential record per user.

Design Notes
------------
All these ports follow *Dependency Inversion Principle (DIP)* to keep
the service layer independent from implementation details.
Concrete adapters (SQL, Redis, flask-jwt-extended) live under ``app.infra``;
the in-memory doubles here are used by unit tests.
"""

from __future__ import annotations

from .external_token_store import (
    ExternalTokenRecord,
    ExternalTokenStore,
    InMemoryExternalTokenStore,
)
from .refresh_token_store import (
    InMemoryRefreshTokenStore,
    RefreshTokenRecord,
    RefreshTokenStore,
    RotationResult,
)
from .token_codec import AccessClaims, StubTokenCodec, TokenCodec, TokenStatus

__all__ = [
    "TokenCodec",
    "TokenStatus",
    "AccessClaims",
    "StubTokenCodec",
    "RefreshTokenStore",
    "RefreshTokenRecord",
    "RotationResult",
    "InMemoryRefreshTokenStore",
    "ExternalTokenStore",
    "ExternalTokenRecord",
    "InMemoryExternalTokenStore",
]
