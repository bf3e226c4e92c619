"""Weighted roulette wheel and arcade light-chase picker engine."""

from roulette.arcade import ArcadeAnimator
from roulette.core.events import EventBus, EventType
from roulette.core.scheduler import AsyncioScheduler, ManualScheduler
from roulette.roster import FavoriteSlots, Roster
from roulette.selection import Entry, clamp_weight, normalize_entries, pick
from roulette.wheel import SpinAnimator, WheelGeometry

__version__ = "0.1.0"

__all__ = [
    "Entry",
    "clamp_weight",
    "normalize_entries",
    "pick",
    "WheelGeometry",
    "SpinAnimator",
    "ArcadeAnimator",
    "Roster",
    "FavoriteSlots",
    "EventBus",
    "EventType",
    "ManualScheduler",
    "AsyncioScheduler",
]
