"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Leasing Engine"
    debug: bool = False
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Database
    database_url: str
    database_echo: bool = False

    # Reconciliation loop
    reconciliation_enabled: bool = True
    reconciliation_interval_seconds: float = 3600.0
    reconciliation_error_backoff_seconds: float = 300.0


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
