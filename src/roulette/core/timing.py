"""Clamping of user-supplied spin durations.

Out-of-range or malformed values are pulled into range rather than
rejected; the host stays interactive whatever was typed in.
"""

from dataclasses import dataclass
from typing import Union
import math

from roulette.config.settings import TimingSettings

Number = Union[float, int, str, None]


@dataclass(frozen=True)
class TimingPlan:
    """Durations actually applied to a spin, in seconds."""

    max_time: float
    decel_time: float


def to_float(value: Number) -> float:
    """Parse a number or numeric string; anything else becomes NaN."""
    if value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def clamp_range(value: Number, low: float, high: float) -> float:
    """Clamp into [low, high]. NaN and unparsable input map to ``low``."""
    num = to_float(value)
    if math.isnan(num):
        return low
    return min(high, max(low, num))


def resolve_timing(max_time: Number, decel_time: Number, limits: TimingSettings) -> TimingPlan:
    """Clamp both durations and keep a non-empty full-speed phase."""
    total = clamp_range(max_time, limits.max_time_min, limits.max_time_max)
    # decel >= total is checked before the upper clamp
    decel = clamp_range(decel_time, limits.decel_time_min, math.inf)
    if decel >= total:
        decel = max(limits.decel_time_min, total * limits.decel_fallback_ratio)
    else:
        decel = min(decel, limits.decel_time_max)
    return TimingPlan(total, decel)
