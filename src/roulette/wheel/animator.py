"""Continuous wheel spin animation.

The wheel starts at a random angle with a random angular velocity, holds
that speed, then decays linearly to zero over the decel duration. The
winner is whatever segment sits under the top pointer once it settles.

Deceleration starts either when ``max_time - decel_time`` has elapsed
since start, or earlier on an explicit ``request_decel()``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional
import logging
import math
import random

from roulette.config.settings import SpinSettings, TimingSettings, get_settings
from roulette.core.events import (
    Event,
    EventBus,
    EventType,
    finalized_event,
    no_eligible_event,
    state_changed_event,
)
from roulette.core.scheduler import Scheduler, TimerHandle
from roulette.core.state import SPIN_TRANSITIONS, SpinPhase, StateMachine
from roulette.core.timing import Number, TimingPlan, clamp_range, resolve_timing, to_float
from roulette.selection import Entry, RandomSource
from roulette.wheel.geometry import TAU, WheelGeometry, normalize_angle

logger = logging.getLogger(__name__)

StateChangeCallback = Callable[[bool, dict[str, Any]], None]
FinalizeCallback = Callable[[str], None]


@dataclass
class SpinState:
    """Mutable physics of the current spin."""

    rotation: float = 0.0
    angular_velocity: float = 0.0
    decel_requested: bool = False
    decel_elapsed: float = 0.0
    decel_duration: float = 0.0
    initial_velocity: float = 0.0  # captured at decel start
    running: bool = False


class SpinAnimator:
    """Drives one wheel through IDLE -> SPINNING -> DECELERATING -> IDLE.

    The animator owns no timer of its own: every frame is requested from
    the injected scheduler, and all randomness comes from ``rand``.
    """

    source = "wheel"

    def __init__(
        self,
        scheduler: Scheduler,
        rand: RandomSource = random.random,
        event_bus: Optional[EventBus] = None,
        settings: Optional[SpinSettings] = None,
        timing: Optional[TimingSettings] = None,
        entries: Iterable[Entry] = (),
    ) -> None:
        self._scheduler = scheduler
        self._rand = rand
        self.event_bus = event_bus or EventBus()
        self.settings = settings or get_settings().spin
        self.timing = timing or get_settings().timing

        self.geometry = WheelGeometry(entries)
        self.state = SpinState()
        self._machine: StateMachine[SpinPhase] = StateMachine(
            SpinPhase.IDLE, SPIN_TRANSITIONS, name="wheel"
        )

        self._plan: Optional[TimingPlan] = None
        self._current_decel = self.timing.decel_time_sec
        self._started_at = 0.0
        self._last_frame_at = 0.0
        self._frame_handle: Optional[TimerHandle] = None
        self._pending_entries: Optional[tuple[Entry, ...]] = None
        self._last_name = self.geometry.name_at(0.0)
        self.last_winner: Optional[str] = None

        # Callbacks
        self._on_state_change: Optional[StateChangeCallback] = None
        self._on_finalize: Optional[FinalizeCallback] = None

    # Properties

    @property
    def phase(self) -> SpinPhase:
        return self._machine.state

    @property
    def is_running(self) -> bool:
        return self.state.running

    @property
    def rotation(self) -> float:
        return self.state.rotation

    @property
    def angular_velocity(self) -> float:
        return self.state.angular_velocity

    @property
    def plan(self) -> Optional[TimingPlan]:
        """Durations applied to the current or last spin."""
        return self._plan

    def set_on_state_change(self, callback: StateChangeCallback) -> None:
        """Set callback for running/stop-enabled changes."""
        self._on_state_change = callback

    def set_on_finalize(self, callback: FinalizeCallback) -> None:
        """Set callback receiving the winner name."""
        self._on_finalize = callback

    # Inputs

    def rebuild(self, entries: Iterable[Entry]) -> None:
        """Replace the segment table from a fresh snapshot.

        While a spin is in flight the snapshot is held back and applied
        once the wheel settles, so the spinning geometry never changes.
        """
        snapshot = tuple(entries)
        if self.state.running:
            self._pending_entries = snapshot
            logger.debug("Wheel rebuild deferred until spin settles")
            return
        self.geometry.rebuild(snapshot)
        self._last_name = self.pick_current_name()

    def start(self, max_time: Number = None, decel_time: Number = None) -> Optional[TimingPlan]:
        """Start a spin.

        Args:
            max_time: Total spin time in seconds, clamped to [1, 20]
            decel_time: Deceleration time in seconds, clamped to [0.2, 3]

        Returns:
            The applied durations, or None if already spinning or nothing
            is enabled
        """
        if self.state.running:
            return None

        if not self.geometry.has_segments:
            logger.warning("Wheel start ignored: no eligible entries")
            self.event_bus.emit(no_eligible_event(self.source))
            return None

        if max_time is None:
            max_time = self.timing.max_time_sec
        if decel_time is None:
            decel_time = self.timing.decel_time_sec
        plan = resolve_timing(max_time, decel_time, self.timing)

        s = self.settings
        self.state = SpinState(
            rotation=self._rand() * TAU,
            angular_velocity=s.initial_velocity_min
            + self._rand() * (s.initial_velocity_max - s.initial_velocity_min),
            running=True,
        )
        self._plan = plan
        self._current_decel = plan.decel_time
        self._started_at = self._scheduler.time()
        self._last_frame_at = self._started_at
        self._last_name = self.pick_current_name()
        self._machine.transition(SpinPhase.SPINNING)

        self.event_bus.emit(Event(
            EventType.SPIN_STARTED,
            data={"max_time": plan.max_time, "decel_time": plan.decel_time},
            source=self.source,
        ))
        self._notify_state(True, stop_enabled=True)
        self._schedule_frame()

        logger.info(
            f"Wheel spinning: max={plan.max_time:.2f}s decel={plan.decel_time:.2f}s "
            f"omega={self.state.angular_velocity:.2f}rad/s"
        )
        return plan

    def request_decel(self, duration: Number = None) -> bool:
        """Begin decelerating now.

        Args:
            duration: Optional new decel time; unparsable input keeps the
                last used duration

        Returns:
            True if deceleration started
        """
        if self.phase != SpinPhase.SPINNING:
            return False

        value = to_float(duration)
        if math.isnan(value):
            value = self._current_decel
        self._current_decel = clamp_range(
            value, self.timing.decel_time_min, self.timing.decel_time_max
        )
        self._begin_decel(self._current_decel)
        return True

    def stop(self) -> bool:
        """Explicit stop using the last decel duration."""
        return self.request_decel()

    def pick_current_name(self) -> str:
        """Name under the pointer right now (empty if the wheel is empty)."""
        return self.geometry.name_at(self.state.rotation)

    # Frame loop

    def _schedule_frame(self) -> None:
        self._frame_handle = self._scheduler.call_later(
            self.settings.frame_interval_sec, self._on_frame
        )

    def _on_frame(self) -> None:
        self._frame_handle = None
        if not self.state.running:
            return

        now = self._scheduler.time()
        delta = max(0.0, min(self.settings.max_frame_delta_sec, now - self._last_frame_at))
        self._last_frame_at = now

        if self.phase == SpinPhase.SPINNING and self._plan is not None:
            elapsed = now - self._started_at
            if elapsed >= self._plan.max_time - self._plan.decel_time:
                self._begin_decel(self._current_decel)

        state = self.state
        if state.decel_requested:
            state.decel_elapsed += delta
            remaining = max(0.0, state.decel_duration - state.decel_elapsed)
            state.angular_velocity = state.initial_velocity * (remaining / state.decel_duration)
            if remaining <= 0 or state.angular_velocity <= self.settings.settle_epsilon:
                self._finalize()
                return

        state.rotation = normalize_angle(state.rotation + state.angular_velocity * delta)

        # Segment boundary crossed
        name = self.pick_current_name()
        if name != self._last_name:
            self._last_name = name
            self.event_bus.emit(Event(
                EventType.HIGHLIGHT_CHANGED,
                data={"current": name},
                source=self.source,
            ))

        self._schedule_frame()

    def _begin_decel(self, duration: float) -> None:
        state = self.state
        state.decel_requested = True
        state.decel_elapsed = 0.0
        state.decel_duration = duration
        state.initial_velocity = max(self.settings.min_decel_velocity, state.angular_velocity)
        self._machine.transition(SpinPhase.DECELERATING)

        self.event_bus.emit(Event(
            EventType.DECEL_STARTED,
            data={"duration": duration, "velocity": state.initial_velocity},
            source=self.source,
        ))
        self._notify_state(True, stop_enabled=False)
        logger.info(f"Wheel decelerating over {duration:.2f}s")

    def _finalize(self) -> None:
        if self._frame_handle is not None:
            self._frame_handle.cancel()
            self._frame_handle = None

        state = self.state
        jitter = (self._rand() - 0.5) * 2 * self.settings.jitter_rad
        state.rotation = normalize_angle(state.rotation + jitter)
        state.angular_velocity = 0.0
        state.decel_requested = False
        state.running = False
        self._machine.transition(SpinPhase.IDLE)

        winner = self.pick_current_name()
        self.last_winner = winner

        if self._pending_entries is not None:
            self.geometry.rebuild(self._pending_entries)
            self._pending_entries = None

        self._notify_state(False, stop_enabled=False)
        self.event_bus.emit(finalized_event(winner, self.source))
        if self._on_finalize:
            self._on_finalize(winner)

        logger.info(f"Wheel settled on: {winner or '(none)'}")

    def _notify_state(self, running: bool, stop_enabled: bool) -> None:
        self.event_bus.emit(state_changed_event(running, stop_enabled, self.source))
        if self._on_state_change:
            self._on_state_change(running, {"stop_enabled": stop_enabled})
