# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

import os
from unittest.mock import patch

import pytest
from pydantic import SecretStr

from src.core.config.settings import (
    CORSSettings,
    DatabaseSettings,
    JWTSettings,
    LLMSettings,
    RateLimitSettings,
    RedisSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


class TestDatabaseSettings:
    def test_default_values(self) -> None:
        settings = DatabaseSettings()

        assert settings.url.startswith("mysql+aiomysql://")
        assert settings.auto_migrate is True
        assert settings.seed_on_startup is True
        assert settings.is_sqlite is False

    def test_env_override(self) -> None:
        with patch.dict(os.environ, {"DATABASE_URL": "sqlite+aiosqlite:///./kct.db"}):
            settings = DatabaseSettings()

        assert settings.is_sqlite is True


class TestRedisSettings:
    def test_url_without_password(self) -> None:
        assert RedisSettings().url == "redis://localhost:6379/0"

    def test_url_with_password(self) -> None:
        settings = RedisSettings(password=SecretStr("s3cret"), host="cache", database=2)

        assert settings.url == "redis://:s3cret@cache:6379/2"


class TestJWTSettings:
    def test_unprefixed_expiry_env_names(self) -> None:
        env = {"ACCESS_TOKEN_EXPIRE_MINUTES": "15", "REFRESH_TOKEN_EXPIRE_DAYS": "3"}
        with patch.dict(os.environ, env):
            settings = JWTSettings()

        assert settings.access_token_expire_minutes == 15
        assert settings.refresh_token_expire_days == 3


class TestRateLimitSettings:
    def test_defaults(self) -> None:
        settings = RateLimitSettings()

        assert settings.burst == "10/second"
        assert settings.enabled is True
        assert settings.use_redis is False


class TestCORSSettings:
    def test_origins_list(self) -> None:
        settings = CORSSettings(origins="http://a.test, http://b.test,")

        assert settings.origins_list == ["http://a.test", "http://b.test"]


class TestLLMSettings:
    def test_disabled_without_model(self) -> None:
        assert LLMSettings(model="").enabled is False

    def test_enabled_with_model(self) -> None:
        assert LLMSettings(model="gpt-4o-mini").enabled is True


class TestSettings:
    def test_production_rejects_default_secret(self) -> None:
        with pytest.raises(ValueError, match="JWT secret"):
            Settings(environment="production", debug=False)

    def test_production_rejects_debug(self) -> None:
        with pytest.raises(ValueError, match="DEBUG"):
            Settings(
                environment="production",
                debug=True,
                jwt=JWTSettings(secret_key=SecretStr("a-real-secret")),
            )

    def test_production_rejects_default_seed_password(self) -> None:
        with pytest.raises(ValueError, match="Seeded admin password"):
            Settings(
                environment="production",
                debug=False,
                jwt=JWTSettings(secret_key=SecretStr("a-real-secret")),
            )

    def test_production_without_seeding(self) -> None:
        settings = Settings(
            environment="production",
            debug=False,
            jwt=JWTSettings(secret_key=SecretStr("a-real-secret")),
            database=DatabaseSettings(seed_on_startup=False),
        )

        assert settings.is_production is True

    def test_rate_limit_storage_uri(self) -> None:
        assert Settings().rate_limit_storage_uri == "memory://"

        settings = Settings(rate_limit=RateLimitSettings(use_redis=True))
        assert settings.rate_limit_storage_uri.startswith("redis://")

    def test_get_settings_is_cached(self) -> None:
        clear_settings_cache()
        try:
            assert get_settings() is get_settings()
        finally:
            clear_settings_cache()
