"""Unit tests for signing-key derivation and the configuration guards."""

from __future__ import annotations

import pytest
from app.container import build_refresh_store, oauth_config_from
from app.core.config import TestingConfig
from app.core.security import MIN_KEY_BYTES, derive_signing_key
from app.infra.sql import SQLRefreshTokenStore
from app.services._shared.errors import ConfigurationError
from flask import Flask


def test_long_secret_is_used_as_is():
    secret = "k" * 80
    assert derive_signing_key(secret, allow_padding=False) == secret


def test_short_secret_is_padded_when_allowed():
    key = derive_signing_key("dev", allow_padding=True)

    assert len(key.encode()) == MIN_KEY_BYTES
    assert key.startswith("dev")
    assert key == derive_signing_key("dev", allow_padding=True)


def test_short_secret_is_refused_when_padding_disallowed():
    with pytest.raises(ConfigurationError, match="at least 64 bytes"):
        derive_signing_key("dev", allow_padding=False)


@pytest.mark.parametrize("secret", ["", "   "])
def test_blank_secret_is_refused(secret):
    with pytest.raises(ConfigurationError):
        derive_signing_key(secret, allow_padding=True)


def _flask(**overrides) -> Flask:
    app = Flask("config-test")
    app.config.from_object(TestingConfig)
    app.config.update(overrides)
    return app


def test_refresh_store_backends():
    assert isinstance(build_refresh_store(_flask()), SQLRefreshTokenStore)
    with pytest.raises(ConfigurationError, match="REDIS_URL"):
        build_refresh_store(_flask(REFRESH_TOKEN_BACKEND="redis", REDIS_URL=None))
    with pytest.raises(ConfigurationError, match="Unknown"):
        build_refresh_store(_flask(REFRESH_TOKEN_BACKEND="memcached"))


def test_oauth_config_from_flask_config():
    cfg = oauth_config_from(_flask(OAUTH_HTTP_TIMEOUT=3).config)

    assert cfg.client_id == "test-client-id.apps.googleusercontent.com"
    assert cfg.token_url == "https://oauth2.googleapis.com/token"
    assert cfg.timeout == 3.0
