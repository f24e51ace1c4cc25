"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # Board settings
    BOARD_NAME: str = "Banda Health"

    # Sprint resolution settings
    SPRINT_RESOLUTION_POLICY: str = "boundary"
    LOOKAHEAD_DAYS: int = 14

    # Optional YAML file overriding host field and enum value names
    RULE_SCHEMA_PATH: Path | None = None


settings = Settings()
