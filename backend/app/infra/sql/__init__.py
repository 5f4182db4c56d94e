"""Relational adapters for the credential-store ports."""

from .sql_external_token_store import SQLExternalTokenStore
from .sql_refresh_token_store import SQLRefreshTokenStore

__all__ = ["SQLRefreshTokenStore", "SQLExternalTokenStore"]
