"""Animation helpers for the roulette engine."""

from roulette.animation.easing import Easing, get_easing, interpolate

__all__ = [
    "Easing",
    "get_easing",
    "interpolate",
]
