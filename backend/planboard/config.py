"""
Runtime settings for Planboard.

Values come from the environment (prefix ``PLANBOARD_``) or a local
``.env`` file. Board-level configuration (weekends, holidays, hours per
day) lives on ``AppConfig`` instead, because it is part of the undoable
application state.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide settings."""

    model_config = SettingsConfigDict(
        env_prefix="PLANBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool = False

    # Undo/redo
    history_limit: int = 50

    # Defaults for new boards
    default_hours_per_day: float = 9

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
