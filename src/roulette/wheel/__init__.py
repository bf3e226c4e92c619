"""Continuous roulette wheel: segment geometry and spin animation."""

from roulette.wheel.geometry import (
    TAU,
    Segment,
    WheelGeometry,
    build_segments,
    normalize_angle,
    pointer_angle,
)
from roulette.wheel.animator import SpinAnimator, SpinState

__all__ = [
    "TAU",
    "Segment",
    "WheelGeometry",
    "build_segments",
    "normalize_angle",
    "pointer_angle",
    "SpinAnimator",
    "SpinState",
]
