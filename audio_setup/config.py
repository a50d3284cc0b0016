"""
Runtime settings for Audio Setup
"""

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .audio.validator import MAX_DEVICE_ID_LENGTH


class AudioSetupSettings(BaseSettings):
    """Runtime configuration, read from AUDIO_SETUP_* environment variables."""

    # Audio control executable
    pactl_path: str = Field(
        default="pactl", description="pactl executable name or path"
    )
    command_timeout: float = Field(
        default=5.0, gt=0, description="Seconds before a pactl call is abandoned"
    )
    force_c_locale: bool = Field(
        default=True, description="Run pactl with LC_ALL=C so labels stay in English"
    )
    max_device_id_length: int = Field(default=MAX_DEVICE_ID_LENGTH, gt=0)

    # Logging
    log_dir: str = Field(default=os.path.expanduser("~/.local/log/audio-setup"))
    log_level: str = Field(default="INFO")

    # API server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    model_config = SettingsConfigDict(
        env_prefix="AUDIO_SETUP_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> AudioSetupSettings:
    return AudioSetupSettings()
