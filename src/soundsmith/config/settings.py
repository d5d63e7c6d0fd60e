"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from soundsmith.domain.shared.messages import ErrorMessages

_SNOWFLAKE_MAX = 2**64


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: str = Field(
        default="!",
        min_length=1,
        max_length=5,
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    owner_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("owner_ids", "owners")
    )
    test_guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )
    sync_on_startup: bool = True

    @field_validator("owner_ids", "test_guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            if not isinstance(snowflake, int) or not 0 < snowflake < _SNOWFLAKE_MAX:
                raise ValueError(f"Invalid Discord snowflake: {snowflake!r}")
        return v


class AudioSettings(BaseModel):
    """Audio playback and media lookup configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    # Perceived loudness; mapped onto a logarithmic curve at playback.
    default_volume: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        validation_alias=AliasChoices("default_volume", "volume"),
    )
    ffmpeg_before_options: str = "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5"
    ffmpeg_options: str = "-vn"
    ytdlp_format: str = "bestaudio/best"
    local_tracks_dir: str = Field(
        default="tracks", validation_alias=AliasChoices("local_tracks_dir", "tracks_dir")
    )
    presets_file: str | None = None
    info_cache_ttl_seconds: int = Field(
        default=600,
        ge=0,
        validation_alias=AliasChoices("info_cache_ttl_seconds", "cache_ttl"),
    )


class VoiceSettings(BaseModel):
    """Voice connection configuration."""

    model_config = SettingsConfigDict(frozen=True, strict=True, populate_by_name=True)

    connect_timeout_seconds: float = Field(
        default=20.0,
        ge=5.0,
        le=60.0,
        validation_alias=AliasChoices("connect_timeout_seconds", "connect_timeout"),
    )
    # Let the voice client rejoin after transient drops.
    reconnect: bool = True
    self_deaf: bool = True


class DisplaySettings(BaseModel):
    """Reply formatting limits."""

    model_config = SettingsConfigDict(frozen=True, strict=True)

    queue_max_items: int = Field(default=20, ge=1, le=100)
    # Discord rejects messages over 2000 characters.
    queue_max_chars: int = Field(default=1800, ge=200, le=2000)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, AUDIO__DEFAULT_VOLUME, VOICE__CONNECT_TIMEOUT, etc. (nested)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        strict=True,
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    voice: VoiceSettings = Field(default_factory=VoiceSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
