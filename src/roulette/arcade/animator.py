"""Arcade light-chase animation.

One slot of the board lights up per tick. Every tick is a fresh weighted
draw over the entries enabled *right now*, so edits made during a run
take effect on the next tick. The run has a tick budget; once it drops
to the decel budget the chase starts stopping, burns the remaining budget
twice as fast and stretches its tick interval from 80ms toward 300ms.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional
import logging
import random

from roulette.animation.easing import interpolate
from roulette.arcade.blink import WinnerBlink
from roulette.config.settings import ArcadeSettings, TimingSettings, get_settings
from roulette.core.events import (
    Event,
    EventBus,
    EventType,
    finalized_event,
    no_eligible_event,
    state_changed_event,
)
from roulette.core.scheduler import Scheduler, TimerHandle
from roulette.core.state import ARCADE_TRANSITIONS, ArcadePhase, StateMachine
from roulette.core.timing import Number, TimingPlan, resolve_timing
from roulette.selection import Entry, RandomSource, normalize_entries, pick_index

logger = logging.getLogger(__name__)

StateChangeCallback = Callable[[bool, dict[str, Any]], None]
FinalizeCallback = Callable[[str], None]


@dataclass
class ArcadeState:
    """Tick bookkeeping of the current chase."""

    current_index: int = -1
    ticks_remaining: int = 0
    decel_ticks: int = 0
    stopping: bool = False
    tick_interval_ms: float = 80.0


class ArcadeAnimator:
    """Drives the board through IDLE -> RUNNING -> STOPPING -> IDLE."""

    source = "arcade"

    def __init__(
        self,
        scheduler: Scheduler,
        rand: RandomSource = random.random,
        event_bus: Optional[EventBus] = None,
        settings: Optional[ArcadeSettings] = None,
        timing: Optional[TimingSettings] = None,
        entries: Iterable[Entry] = (),
    ) -> None:
        self._scheduler = scheduler
        self._rand = rand
        self.event_bus = event_bus or EventBus()
        self.settings = settings or get_settings().arcade
        self.timing = timing or get_settings().timing

        self._entries: tuple[Entry, ...] = normalize_entries(entries)
        self.state = ArcadeState(tick_interval_ms=self.settings.base_tick_ms)
        self._machine: StateMachine[ArcadePhase] = StateMachine(
            ArcadePhase.IDLE, ARCADE_TRANSITIONS, name="arcade"
        )
        self.blink = WinnerBlink(scheduler, self.event_bus, self.settings)
        self._tick_handle: Optional[TimerHandle] = None
        self._plan: Optional[TimingPlan] = None
        self.last_winner: Optional[str] = None

        self._on_state_change: Optional[StateChangeCallback] = None
        self._on_finalize: Optional[FinalizeCallback] = None

    @property
    def phase(self) -> ArcadePhase:
        return self._machine.state

    @property
    def is_running(self) -> bool:
        return self._machine.is_in(ArcadePhase.RUNNING, ArcadePhase.STOPPING)

    @property
    def entries(self) -> tuple[Entry, ...]:
        """Board slots in order, disabled ones included."""
        return self._entries

    @property
    def plan(self) -> Optional[TimingPlan]:
        return self._plan

    def set_on_state_change(self, callback: StateChangeCallback) -> None:
        self._on_state_change = callback

    def set_on_finalize(self, callback: FinalizeCallback) -> None:
        self._on_finalize = callback

    def rebuild(self, entries: Iterable[Entry]) -> None:
        """Replace the board slots. Applies immediately, even mid-run.

        During a run, a lit slot that no longer exists or is now disabled
        is relit at once on a fresh weighted draw (or cleared when nothing
        is enabled), so the highlight never points at an ineligible slot.
        """
        self._entries = normalize_entries(entries)
        logger.debug(f"Arcade board rebuilt with {len(self._entries)} slots")

        if not self.is_running:
            return
        index = self.state.current_index
        if 0 <= index < len(self._entries) and self._entries[index].enabled:
            return
        self.state.current_index = pick_index(self._entries, self._rand)
        self._emit_highlight()

    def pick_current_name(self) -> str:
        """Name of the highlighted slot, or empty when nothing is lit."""
        index = self.state.current_index
        if 0 <= index < len(self._entries):
            return self._entries[index].name
        return ""

    def start(self, max_time: Number = None, decel_time: Number = None) -> Optional[TimingPlan]:
        """Start the chase.

        Returns:
            The applied durations, or None if already running or no entry
            is enabled
        """
        if self.is_running:
            return None

        first = pick_index(self._entries, self._rand)
        if first < 0:
            logger.warning("Arcade start ignored: no eligible entries")
            self.event_bus.emit(no_eligible_event(self.source))
            return None

        if max_time is None:
            max_time = self.timing.max_time_sec
        if decel_time is None:
            decel_time = self.timing.decel_time_sec
        plan = resolve_timing(max_time, decel_time, self.timing)

        base_sec = self.settings.base_tick_ms / 1000
        self.blink.cancel()
        self.state = ArcadeState(
            current_index=first,
            ticks_remaining=max(1, round(plan.max_time / base_sec)),
            decel_ticks=max(1, round(plan.decel_time / base_sec)),
            tick_interval_ms=self.settings.base_tick_ms,
        )
        self._plan = plan
        self._machine.transition(ArcadePhase.RUNNING)

        self.event_bus.emit(Event(
            EventType.SPIN_STARTED,
            data={
                "max_time": plan.max_time,
                "decel_time": plan.decel_time,
                "ticks": self.state.ticks_remaining,
                "decel_ticks": self.state.decel_ticks,
            },
            source=self.source,
        ))
        self._emit_highlight()
        self._notify_state(True, stop_enabled=True)
        self._schedule_tick()

        logger.info(
            f"Arcade chase started: {self.state.ticks_remaining} ticks, "
            f"{self.state.decel_ticks} decel ticks"
        )
        return plan

    def request_stop(self) -> bool:
        """Cap the remaining budget to the decel budget and start stopping."""
        if self.phase != ArcadePhase.RUNNING:
            return False
        self.state.ticks_remaining = min(self.state.ticks_remaining, self.state.decel_ticks)
        self._enter_stopping()
        return True

    # Alias matching the wheel's API
    request_decel = request_stop

    def _schedule_tick(self) -> None:
        self._tick_handle = self._scheduler.call_later(
            self.state.tick_interval_ms / 1000, self._on_tick
        )

    def _on_tick(self) -> None:
        self._tick_handle = None
        if not self.is_running:
            return

        state = self.state
        index = pick_index(self._entries, self._rand)
        if index < 0:
            logger.warning("Arcade chase lost every enabled entry")
            self.event_bus.emit(no_eligible_event(self.source))
            state.current_index = -1
            self._finalize()
            return

        state.current_index = index
        self._emit_highlight()

        if state.ticks_remaining > 0:
            state.ticks_remaining -= 2 if state.stopping else 1

        if not state.stopping and state.ticks_remaining <= state.decel_ticks:
            self._enter_stopping()

        if state.ticks_remaining <= 0:
            self._finalize()
            return

        if state.stopping:
            progress = 1.0 - max(state.ticks_remaining, 0) / max(1, state.decel_ticks)
            state.tick_interval_ms = interpolate(
                self.settings.base_tick_ms,
                self.settings.max_tick_ms,
                progress,
                self.settings.interval_easing,
            )
        else:
            state.tick_interval_ms = self.settings.base_tick_ms

        self._schedule_tick()

    def _enter_stopping(self) -> None:
        self.state.stopping = True
        self._machine.transition(ArcadePhase.STOPPING)
        self.event_bus.emit(Event(
            EventType.DECEL_STARTED,
            data={"ticks_remaining": self.state.ticks_remaining},
            source=self.source,
        ))
        self._notify_state(True, stop_enabled=False)

    def _finalize(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

        state = self.state
        state.stopping = False
        state.tick_interval_ms = self.settings.base_tick_ms
        self._machine.transition(ArcadePhase.IDLE)

        winner = self.pick_current_name()
        self.last_winner = winner

        self._notify_state(False, stop_enabled=False)
        self.event_bus.emit(finalized_event(winner, self.source, index=state.current_index))
        if self._on_finalize:
            self._on_finalize(winner)

        if winner:
            self.blink.start(state.current_index)

        logger.info(f"Arcade chase stopped on: {winner or '(none)'}")

    def _emit_highlight(self) -> None:
        self.event_bus.emit(Event(
            EventType.HIGHLIGHT_CHANGED,
            data={"index": self.state.current_index, "current": self.pick_current_name()},
            source=self.source,
        ))

    def _notify_state(self, running: bool, stop_enabled: bool) -> None:
        self.event_bus.emit(state_changed_event(running, stop_enabled, self.source))
        if self._on_state_change:
            self._on_state_change(running, {"stop_enabled": stop_enabled})
