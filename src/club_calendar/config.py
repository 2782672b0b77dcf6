"""Configuration management for Club Calendar application."""

from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class AppConfig(BaseSettings):
    """Application configuration."""

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: Optional[Path] = Field(default=None, validation_alias="LOG_FILE")

    # Expansion settings
    timezone: str = Field(default="Europe/Berlin", validation_alias="CLUB_CALENDAR_TIMEZONE")
    max_iterations: int = Field(default=500, validation_alias="CLUB_CALENDAR_MAX_ITERATIONS")
    horizon_days: int = Field(default=365, validation_alias="CLUB_CALENDAR_HORIZON_DAYS")

    # Dashboard settings
    headline_type_name: str = Field(
        default="Spieltag", validation_alias="CLUB_CALENDAR_HEADLINE_TYPE"
    )
    headline_limit: int = Field(default=1, validation_alias="CLUB_CALENDAR_HEADLINE_LIMIT")
    upcoming_limit: int = Field(default=5, validation_alias="CLUB_CALENDAR_UPCOMING_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_parse_none_str="",  # Treat empty string as None
    )


class SnapshotConfig:
    """Snapshot and viewer configuration loaded from YAML."""

    def __init__(self, config_path: Path = Path("club_calendar.yaml")):
        self.snapshot: Optional[Path] = None
        self.viewer_teams: list[str] = []
        self.calendar_name: str = "Vereinskalender"

        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

            snapshot = data.get("snapshot")
            if snapshot:
                # Relative paths are resolved against the config file
                self.snapshot = (config_path.parent / snapshot).resolve()

            viewer_data = data.get("viewer", {})
            self.viewer_teams = [str(t) for t in viewer_data.get("teams", [])]
            self.calendar_name = data.get("calendar_name", self.calendar_name)

    @property
    def has_config(self) -> bool:
        return self.snapshot is not None


# Global config instances
config = AppConfig()
snapshot_config = SnapshotConfig()
