"""
State machines for the spin animators.

Wheel:
    IDLE -> SPINNING -> DECELERATING -> IDLE

Arcade:
    IDLE -> RUNNING -> STOPPING -> IDLE

The settled IDLE state is terminal for one spin; a new start() leaves it
again. Transitions outside the tables are rejected.
"""

from enum import Enum, auto
from typing import Callable, Generic, Iterable, TypeVar
import logging

logger = logging.getLogger(__name__)


class SpinPhase(Enum):
    """Continuous wheel phases."""
    IDLE = auto()
    SPINNING = auto()
    DECELERATING = auto()


class ArcadePhase(Enum):
    """Arcade light-chase phases."""
    IDLE = auto()
    RUNNING = auto()
    STOPPING = auto()


SPIN_TRANSITIONS: list[tuple[SpinPhase, SpinPhase]] = [
    (SpinPhase.IDLE, SpinPhase.SPINNING),
    (SpinPhase.SPINNING, SpinPhase.DECELERATING),
    (SpinPhase.DECELERATING, SpinPhase.IDLE),
]

ARCADE_TRANSITIONS: list[tuple[ArcadePhase, ArcadePhase]] = [
    (ArcadePhase.IDLE, ArcadePhase.RUNNING),
    (ArcadePhase.RUNNING, ArcadePhase.STOPPING),
    (ArcadePhase.STOPPING, ArcadePhase.IDLE),
    # Live entry set emptied mid-run
    (ArcadePhase.RUNNING, ArcadePhase.IDLE),
]

P = TypeVar("P", bound=Enum)

Listener = Callable[[P, P], None]


class StateMachine(Generic[P]):
    """
    Tracks the current phase and enforces a transition table.

    Listeners are notified after each accepted transition as
    ``listener(old_phase, new_phase)``.
    """

    def __init__(
        self,
        initial: P,
        transitions: Iterable[tuple[P, P]],
        name: str = "machine",
    ) -> None:
        self._initial = initial
        self._state = initial
        self._valid_transitions = set(transitions)
        self._listeners: list[Listener] = []
        self._name = name
        logger.debug(f"{name}: initialized in {initial.name}")

    @property
    def state(self) -> P:
        """Get current state."""
        return self._state

    def is_in(self, *states: P) -> bool:
        """Check whether the current state is any of ``states``."""
        return self._state in states

    def can_transition(self, to_state: P) -> bool:
        """Check if transition to given state is valid."""
        return (self._state, to_state) in self._valid_transitions

    def transition(self, to_state: P) -> bool:
        """
        Attempt to transition to a new state.

        Returns:
            True if transition successful, False otherwise
        """
        if not self.can_transition(to_state):
            logger.warning(
                f"{self._name}: invalid transition {self._state.name} -> {to_state.name}"
            )
            return False

        old_state = self._state
        self._state = to_state
        logger.debug(f"{self._name}: {old_state.name} -> {to_state.name}")

        for listener in self._listeners:
            try:
                listener(old_state, to_state)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")

        return True

    def add_listener(self, callback: Listener) -> None:
        """Add a state change listener."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Listener) -> None:
        """Remove a state change listener."""
        if callback in self._listeners:
            self._listeners.remove(callback)

    def reset(self) -> None:
        """Force the machine back to its initial state without notifying."""
        self._state = self._initial
