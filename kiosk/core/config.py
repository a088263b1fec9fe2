"""Application configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Pickup Kiosk"
    debug: bool = False

    # Server
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./kiosk.db"

    # Logging
    log_dir: Path = Path.home() / ".logs" / "kiosk"

    # Pickup codes
    pickup_code_length: int = 3
    pickup_code_max_attempts: int = 10

    # Placeholder events created for calendar-sourced ids
    default_event_title: str = "Calendar Event"


settings = Settings()
