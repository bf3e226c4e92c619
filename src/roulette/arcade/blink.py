"""Winner confirmation blink for the arcade board.

Purely presentational: toggles the highlight on the winning slot for a
short while after the chase stops. It never affects which entry won.
"""

from typing import Optional
import logging

from roulette.config.settings import ArcadeSettings
from roulette.core.events import Event, EventBus, EventType
from roulette.core.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


class WinnerBlink:
    """Blinks one slot index at a fixed cadence for a fixed duration."""

    def __init__(self, scheduler: Scheduler, event_bus: EventBus, settings: ArcadeSettings) -> None:
        self._scheduler = scheduler
        self._event_bus = event_bus
        self._settings = settings
        self._handle: Optional[TimerHandle] = None
        self._started_at = 0.0
        self.index = -1
        self.visible = True

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, index: int) -> None:
        self.cancel()
        self.index = index
        self.visible = True
        self._started_at = self._scheduler.time()
        self._schedule()

    def cancel(self) -> None:
        """Stop blinking and leave the highlight visible."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self.visible = True

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(self._settings.blink_interval_sec, self._on_toggle)

    def _on_toggle(self) -> None:
        self._handle = None
        elapsed = self._scheduler.time() - self._started_at
        if elapsed >= self._settings.blink_duration_sec:
            self.visible = True
            self._event_bus.emit(Event(EventType.BLINK_ENDED, data={"index": self.index}, source="arcade"))
            logger.debug(f"Blink ended on slot {self.index}")
            return

        self.visible = not self.visible
        self._event_bus.emit(Event(
            EventType.BLINK_TOGGLED,
            data={"index": self.index, "visible": self.visible},
            source="arcade",
        ))
        self._schedule()
