"""Shared fixtures: a virtual clock, a seeded random source and settings."""

import random

import pytest

from roulette.config import ArcadeSettings, SpinSettings, TimingSettings
from roulette.core.events import EventBus
from roulette.core.scheduler import ManualScheduler
from roulette.selection import Entry


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def rand():
    return random.Random(1234).random


@pytest.fixture
def bus():
    return EventBus(history_limit=1000)


@pytest.fixture
def timing():
    return TimingSettings()


@pytest.fixture
def spin_settings():
    return SpinSettings()


@pytest.fixture
def arcade_settings():
    return ArcadeSettings()


@pytest.fixture
def names():
    return ["Temjin", "Raiden", "Fei-Yen", "Angelan"]


@pytest.fixture
def entries(names):
    return [Entry(name, weight) for name, weight in zip(names, [1, 2, 0.5, 3])]


def history_types(bus, source=None):
    """Event types in emission order, optionally filtered by source."""
    return [
        e.type for e in bus.get_history(limit=10_000)
        if source is None or e.source == source
    ]
