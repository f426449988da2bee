"""
Application settings - pydantic-settings configuration.

This module defines application configuration using pydantic-settings
for environment variable loading with validation and defaults.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # View transitions
    animation_window_ms: int = 300  # Fade-out duration before views swap

    # Notifications and submission feedback
    notification_dismiss_seconds: float = 3.0  # Auto-dismiss delay for notifications
    min_submit_display_seconds: float = 1.0  # Minimum loading state on register

    # Postcode existence lookup
    postcode_lookup_enabled: bool = True
    postcode_lookup_url: str = "https://api.zipaddress.net/"
    postcode_lookup_timeout_seconds: float = 5.0

    # Registration submission
    submit_base_url: str = "http://localhost:8000"
    submit_path: str = "/api/register"
    submit_timeout_seconds: float = 10.0

    # Logging
    log_level: str = "INFO"

    @property
    def animation_window_seconds(self) -> float:
        return self.animation_window_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
