"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "Event Planner"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./event_planner.db"

    # Identity
    admin_identifier: str = "admin@example.com"  # Mock trust model: this id is admin
    session_cookie_name: str = "event_planner_session"

    # Past-event sweep
    past_event_sweep_enabled: bool = True
    past_event_sweep_minutes: int = 60

    # Logging
    log_dir: str = "~/.logs/event_planner"


settings = Settings()
