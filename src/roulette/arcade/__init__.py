"""Arcade light-chase board."""

from roulette.arcade.animator import ArcadeAnimator, ArcadeState
from roulette.arcade.blink import WinnerBlink

__all__ = ["ArcadeAnimator", "ArcadeState", "WinnerBlink"]
