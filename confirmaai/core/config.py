from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_name: str = "ConfirmaAí API"
    database_url: str = (
        "postgresql+psycopg2://confirmaai:confirmaai@db:5432/confirmaai"  # pragma: allowlist secret
    )
    redis_url: str = "redis://redis:6379/0"
    timezone: str = "America/Sao_Paulo"
    cors_origins: list[str] = ["http://localhost:3000"]
    rate_limit_requests: int = 120
    rate_limit_window_seconds: int = 60
    evolution_api_base_url: str = "http://localhost:8080"
    evolution_instance_name: str = ""
    evolution_api_key: str = ""
    whatsapp_mock_mode: bool = False
    jwt_secret: str = "change-me"  # pragma: allowlist secret
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    scheduler_interval_minutes: int = Field(default=30, ge=1, le=24 * 60)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()


settings = get_settings()
