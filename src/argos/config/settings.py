from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized config.

    Key idea:
    - read from env first (so tests/CI can override),
    - otherwise default to local dev values.
    """

    model_config = SettingsConfigDict(env_prefix="ARGOS_", extra="ignore")

    # SQLite file by default (portable, zero-setup)
    db_url: str = "sqlite:///data/argos.db"

    # Shared secret expected in the x-api-key header; unset rejects everyone
    api_key: str | None = None

    # Server-side identity stamped on inferences and counts
    machine_id: str = "unknown"

    # Deployment safety defaults (100 requests / 15 minutes / client IP)
    rate_limit_max: int = 100
    rate_limit_window_s: int = 900

    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


settings = Settings()
