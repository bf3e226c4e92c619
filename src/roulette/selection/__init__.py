"""Weighted selection: entries, weight bounds and random picks."""

from roulette.selection.weights import (
    DEFAULT_WEIGHT,
    MAX_WEIGHT,
    MIN_WEIGHT,
    Entry,
    clamp_weight,
    enabled_entries,
    normalize_entries,
)
from roulette.selection.picker import RandomSource, cumulative_weights, pick, pick_index

__all__ = [
    "Entry",
    "MIN_WEIGHT",
    "MAX_WEIGHT",
    "DEFAULT_WEIGHT",
    "clamp_weight",
    "normalize_entries",
    "enabled_entries",
    "RandomSource",
    "cumulative_weights",
    "pick",
    "pick_index",
]
