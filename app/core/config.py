# app/core/config.py
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime.

    These settings are used for:
    - Service metadata exposed on /health
    - Log verbosity
    - The local timezone used to bucket punches into calendar days
    """

    APP_NAME: str = "Attendance Reconciler"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level for the service (DEBUG/INFO/WARNING/ERROR).",
    )

    LOCAL_TIMEZONE: str = Field(
        default="UTC",
        description=(
            "IANA timezone name (e.g. 'Asia/Kolkata') defining the local calendar "
            "day that punches are grouped by, and the server's notion of 'today' "
            "when a request does not provide one."
        ),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
