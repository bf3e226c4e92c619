"""Core framework components for the roulette engine."""

from .state import ArcadePhase, SpinPhase, StateMachine
from .events import EventBus, Event, EventType
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler

__all__ = [
    "StateMachine",
    "SpinPhase",
    "ArcadePhase",
    "EventBus",
    "Event",
    "EventType",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
]
