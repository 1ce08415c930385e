"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    public_base_url: str = "http://localhost:3000"
    relay_api_url: str = "http://localhost:8000"
    debounce_window_ms: int = 3000
    freshness_window_seconds: float = 5.0
    replay_window_seconds: float = 60.0
    poll_interval_seconds: float = 0.5
    pairing_store_path: str = "~/.scan_relay/pairing.json"
    environment: str = _ENVIRONMENT
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
