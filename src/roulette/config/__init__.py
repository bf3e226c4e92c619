"""Configuration for the roulette engine."""

from .settings import ArcadeSettings, Settings, SpinSettings, TimingSettings, get_settings

__all__ = ["Settings", "TimingSettings", "SpinSettings", "ArcadeSettings", "get_settings"]
