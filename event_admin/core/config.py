"""Application configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Event Admin Console"
    debug: bool = False
    log_dir: Path = Path.home() / ".logs" / "event_admin"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./event_admin.db"

    # Edit sessions
    draft_ttl_minutes: int = 120
    draft_cleanup_interval_minutes: int = 15


settings = Settings()
