"""Redis adapters for the credential-store ports."""

from .redis_refresh_token_store import RedisRefreshTokenStore

__all__ = ["RedisRefreshTokenStore"]
