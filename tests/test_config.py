"""
Tests for settings.
"""

import pytest

from suiquest_api.config import Settings

ENV_VARS = ["PORT", "HOST", "DB_URI", "DB_NAME", "ALLOWED_ORIGINS", "NFT_SERVICE", "BRIDGE_URL"]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env) -> None:
    settings = Settings(_env_file=None)
    assert settings.port == 5000
    assert settings.allowed_origins == ["*"]
    assert settings.db_uri is None
    assert settings.db_name == "suiquest"
    assert settings.nft_service is None


def test_environment_overrides(clean_env) -> None:
    clean_env.setenv("PORT", "8080")
    clean_env.setenv("DB_URI", "mongodb://db.test:27017/game")
    clean_env.setenv("ALLOWED_ORIGINS", '["https://suiquest.example"]')
    clean_env.setenv("NFT_SERVICE", "game.nfts:service")

    settings = Settings(_env_file=None)
    assert settings.port == 8080
    assert settings.db_uri == "mongodb://db.test:27017/game"
    assert settings.allowed_origins == ["https://suiquest.example"]
    assert settings.nft_service == "game.nfts:service"


def test_env_file(clean_env, tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("DB_URI=mongodb://from-file:27017\nPORT=5001\n")

    settings = Settings(_env_file=env_file)
    assert settings.db_uri == "mongodb://from-file:27017"
    assert settings.port == 5001
