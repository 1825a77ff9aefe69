"""
Configuration Management
========================

Centralized configuration using Pydantic Settings.
Loads from environment variables and .env file.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Shared config that all settings classes use to load .env
_shared_config = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    env_prefix="",
    extra="ignore",
)


class DeviceSettings(BaseSettings):
    """ADB device configuration."""

    model_config = _shared_config

    adb_device_serial: str = Field(
        default="",
        description="Specific ADB device serial (leave empty for auto-detect)",
    )
    adb_path: str = Field(
        default="",
        description="Path to the adb executable (leave empty to search PATH and ANDROID_HOME)",
    )
    adb_timeout: float = Field(default=15.0, description="Timeout for a single ADB command in seconds")


class DetectionSettings(BaseSettings):
    """Detection engine tuning."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DETECTION_",
        extra="ignore",
    )

    cooldown_ms: int = Field(
        default=1500,
        ge=0,
        description="Minimum interval between two dismiss actions for the same key",
    )
    action_key: str = Field(
        default="content_detected",
        description="Cooldown key used for dismiss actions ('shorts_detected' for the legacy YouTube-only service)",
    )
    youtube_heuristic: Literal["progress_bar", "vertical_player"] = Field(
        default="progress_bar",
        description="YouTube detector: 'progress_bar' (single signal) or 'vertical_player' (dual signal)",
    )
    instagram_heuristic: Literal["section_video", "tab_fullscreen"] = Field(
        default="section_video",
        description="Instagram detector: 'section_video' (section + video signals) or 'tab_fullscreen'",
    )


class ServiceSettings(BaseSettings):
    """Blocker service configuration."""

    model_config = _shared_config

    poll_interval: float = Field(
        default=1.0,
        gt=0,
        description="Seconds between two UI snapshots",
    )
    notification_timeout_ms: int = Field(
        default=100,
        ge=0,
        description="Minimum delay between two events for the same package",
    )
    preferences_path: Path = Field(
        default=Path.home() / ".shorts_blocker" / "preferences.json",
        description="Location of the key-value preferences file",
    )

    @field_validator("preferences_path")
    @classmethod
    def expand_preferences_path(cls, v: Path) -> Path:
        """Expand ``~`` in the preferences path."""
        return v.expanduser()


class ServerSettings(BaseSettings):
    """Settings API server configuration."""

    model_config = _shared_config

    server_host: str = Field(default="127.0.0.1", description="Server host")
    server_port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=True, description="Debug mode")
    environment: str = Field(default="development", description="Environment name (development, staging, production)")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level",
    )


class Settings(BaseSettings):
    """
    Main settings class combining all configuration sections.

    Usage:
        from shorts_blocker.config import get_settings
        settings = get_settings()
        print(settings.detection.cooldown_ms)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Nested settings
    device: DeviceSettings = Field(default_factory=DeviceSettings)
    detection: DetectionSettings = Field(default_factory=DetectionSettings)
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    def __init__(self, **kwargs):
        """Initialize settings with nested configuration."""
        super().__init__(**kwargs)
        # Re-initialize nested settings to pick up env vars
        self.device = DeviceSettings()
        self.detection = DetectionSettings()
        self.service = ServiceSettings()
        self.server = ServerSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings loaded from environment.
    """
    return Settings()
