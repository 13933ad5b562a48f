"""
Configuration settings for flaky-repeat.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from flaky_repeat.repetition.display_name import SHORT_DISPLAY_NAME


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "flaky-repeat"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    CONFIGURE_LOGGING: bool = True  # Runner installs its log handler on first run

    # === Repetition defaults (used by the decorator when a value is omitted) ===
    DEFAULT_REPEATS: int = 1
    DEFAULT_MIN_SUCCESS: int = 1
    DEFAULT_NAME_PATTERN: str = SHORT_DISPLAY_NAME

    # === Monitoring ===
    METRICS_ENABLED: bool = True


# Global settings instance
settings = Settings()
