"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
"""

import math
from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TimingSettings(BaseSettings):
    """Spin duration defaults and the ranges start() arguments are clamped to."""

    model_config = SettingsConfigDict(env_prefix="ROULETTE_TIMING_", extra="ignore")

    # Defaults offered to the host UI
    max_time_sec: float = 5.0
    decel_time_sec: float = 1.5

    max_time_min: float = 1.0
    max_time_max: float = 20.0
    decel_time_min: float = 0.2
    decel_time_max: float = 3.0

    # decel >= max is replaced by max(decel_time_min, max * ratio)
    decel_fallback_ratio: float = Field(default=0.4, gt=0.0, lt=1.0)


class SpinSettings(BaseSettings):
    """Continuous wheel settings."""

    model_config = SettingsConfigDict(env_prefix="ROULETTE_SPIN_", extra="ignore")

    # Physics (rad/s)
    initial_velocity_min: float = 10.0
    initial_velocity_max: float = 14.0
    min_decel_velocity: float = 2.0
    settle_epsilon: float = 1e-4

    # Frame timing
    frame_interval_sec: float = Field(default=1 / 60, gt=0.0)
    max_frame_delta_sec: float = Field(default=0.05, gt=0.0)

    # Landing nudge, +/- this many radians
    jitter_rad: float = Field(default=math.pi / 180, ge=0.0)


class ArcadeSettings(BaseSettings):
    """Arcade light-chase settings."""

    model_config = SettingsConfigDict(env_prefix="ROULETTE_ARCADE_", extra="ignore")

    base_tick_ms: float = Field(default=80.0, gt=0.0)
    max_tick_ms: float = Field(default=300.0, gt=0.0)

    # Winner confirmation blink
    blink_duration_sec: float = 2.0
    blink_interval_sec: float = Field(default=0.25, gt=0.0)

    # Curve for the base -> max interval ramp while stopping
    interval_easing: Literal[
        "linear",
        "ease_in_quad",
        "ease_out_quad",
        "ease_in_cubic",
        "ease_out_cubic",
        "ease_in_sine",
        "ease_out_sine",
    ] = "linear"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ROULETTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    favorite_slot_count: int = Field(default=3, ge=1)

    # Fixed seed for reproducible runs (None = system entropy)
    seed: Optional[int] = None

    # Nested settings
    timing: TimingSettings = Field(default_factory=TimingSettings)
    spin: SpinSettings = Field(default_factory=SpinSettings)
    arcade: ArcadeSettings = Field(default_factory=ArcadeSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
