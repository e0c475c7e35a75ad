"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic import RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True

    # API
    api_v1_prefix: str = "/api/v1"
    admin_prefix: str = "/admin"
    project_name: str = "Tienditas"
    version: str = "0.1.0"

    # Storage (whole store collection lives under one key)
    redis_url: RedisDsn = RedisDsn("redis://localhost:6379/0")
    storage_key: str = "tienditas_stores_data_v2"
    default_store_id: str = "sachacacao"

    # LLM APIs
    openai_api_key: str = ""
    chat_model: str = "gpt-4o-mini"
    palette_model: str = "gpt-4o"
    chat_temperature: float = 0.7
    chat_history_limit: int = 20

    # Orders
    messaging_host: str = "wa.me"
    currency_symbol: str = "S/"

    # Admin
    notification_ttl_seconds: float = 3.0
    max_logo_bytes: int = 4 * 1024 * 1024
    max_admin_sessions: int = 50

    # Chat
    max_chat_sessions: int = 1000

    # Error tracking
    sentry_dsn: str = ""

    # CORS
    cors_origins: list[str] = [
        "http://localhost:8000",
    ]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
