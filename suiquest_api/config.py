"""
Configuration for SuiQuest API.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    API configuration settings.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Server
    host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=5000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode (auto-reload)")
    log_level: str = Field(default="INFO", description="Log level")

    # CORS: every origin is allowed unless narrowed here
    allowed_origins: list[str] = Field(
        default=["*"],
        description="CORS allowed origins"
    )

    # MongoDB
    db_uri: Optional[str] = Field(
        default=None,
        description="MongoDB connection string (required to start the server)"
    )
    db_name: str = Field(
        default="suiquest",
        description="Database name used when DB_URI does not name one"
    )
    db_timeout_ms: int = Field(
        default=5000,
        description="Server selection timeout for the startup ping"
    )

    # External services
    zklogin_verifier_url: str = Field(
        default="http://localhost:8090",
        description="zkLogin token verification service URL"
    )
    bridge_url: str = Field(
        default="http://localhost:8091",
        description="Cross-chain NFT transfer service URL"
    )
    external_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for calls to external services"
    )

    # Game logic
    nft_service: Optional[str] = Field(
        default=None,
        description="NFT service object as 'module:attribute'"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
