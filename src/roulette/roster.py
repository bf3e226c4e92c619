"""Editable entry list and favorite snapshots.

The roster is the list the user edits. The animators never hold a
reference to it; they get immutable snapshots through ``rebuild()``.
Names are unique, trimmed keys.
"""

from typing import Callable, Iterable, Optional
import logging

from roulette.config.settings import get_settings
from roulette.core.events import Event, EventBus, EventType
from roulette.core.timing import Number, to_float
from roulette.selection import DEFAULT_WEIGHT, Entry, clamp_weight, normalize_entries

logger = logging.getLogger(__name__)

ChangeListener = Callable[[tuple[Entry, ...]], None]


class Roster:
    """Ordered, name-keyed list of entries.

    Every successful mutation notifies listeners with a fresh snapshot
    and emits ``ROSTER_CHANGED`` on the bus.
    """

    def __init__(self, entries: Iterable[Entry] = (), event_bus: Optional[EventBus] = None) -> None:
        self._entries: list[Entry] = []
        self._listeners: list[ChangeListener] = []
        self.event_bus = event_bus
        self._load(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._find(name.strip()) >= 0

    @property
    def names(self) -> list[str]:
        return [e.name for e in self._entries]

    def add_listener(self, callback: ChangeListener) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: ChangeListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def snapshot(self) -> tuple[Entry, ...]:
        """Immutable normalized copy of the current list."""
        return tuple(self._entries)

    def active_entries(self) -> list[Entry]:
        return [e for e in self._entries if e.enabled]

    def get(self, name: str) -> Optional[Entry]:
        index = self._find(name.strip())
        return self._entries[index] if index >= 0 else None

    # Mutations

    def add(self, name: str, weight: Number = DEFAULT_WEIGHT, enabled: bool = True,
            image_path: Optional[str] = None) -> bool:
        """Append an entry. Blank or duplicate names are refused."""
        trimmed = (name or "").strip()
        if not trimmed or self._find(trimmed) >= 0:
            return False
        self._entries.append(Entry(trimmed, clamp_weight(to_float(weight)), enabled, image_path))
        self._changed(f"added {trimmed}")
        return True

    def remove(self, name: str) -> bool:
        index = self._find(name.strip())
        if index < 0:
            return False
        del self._entries[index]
        self._changed(f"removed {name.strip()}")
        return True

    def rename(self, old_name: str, new_name: str) -> bool:
        """Rename in place, keeping weight and enabled flag."""
        old_name = (old_name or "").strip()
        trimmed = (new_name or "").strip()
        if not trimmed or trimmed == old_name:
            return False
        index = self._find(old_name)
        if index < 0 or self._find(trimmed) >= 0:
            return False
        old = self._entries[index]
        self._entries[index] = Entry(trimmed, old.weight, old.enabled, old.image_path)
        self._changed(f"renamed {old_name} -> {trimmed}")
        return True

    def set_weight(self, name: str, weight: Number) -> Optional[float]:
        """Set a weight (clamped). Returns the stored value, None if unknown."""
        index = self._find(name.strip())
        if index < 0:
            return None
        old = self._entries[index]
        value = clamp_weight(to_float(weight))
        if value != old.weight:
            self._entries[index] = Entry(old.name, value, old.enabled, old.image_path)
            self._changed(f"weight {old.name}={value}")
        return value

    def set_enabled(self, name: str, enabled: bool) -> bool:
        index = self._find(name.strip())
        if index < 0:
            return False
        old = self._entries[index]
        if old.enabled != bool(enabled):
            self._entries[index] = Entry(old.name, old.weight, bool(enabled), old.image_path)
            self._changed(f"{'enabled' if enabled else 'disabled'} {old.name}")
        return True

    def update_all_enabled(self, mapper: Callable[[bool, str], bool]) -> bool:
        """Map every enabled flag at once. Returns True if anything changed."""
        changed = False
        for i, entry in enumerate(self._entries):
            flag = bool(mapper(entry.enabled, entry.name))
            if flag != entry.enabled:
                self._entries[i] = Entry(entry.name, entry.weight, flag, entry.image_path)
                changed = True
        if changed:
            self._changed("bulk enable update")
        return changed

    def set_all_enabled(self, enabled: bool) -> bool:
        return self.update_all_enabled(lambda _prev, _name: enabled)

    def invert_enabled(self) -> bool:
        return self.update_all_enabled(lambda prev, _name: not prev)

    def clear(self) -> None:
        if self._entries:
            self._entries.clear()
            self._changed("cleared")

    def replace(self, entries: Iterable[Entry]) -> None:
        """Swap the whole list, e.g. when loading a favorite."""
        self._entries.clear()
        self._load(entries)
        self._changed("replaced")

    # Internals

    def _load(self, entries: Iterable[Entry]) -> None:
        for entry in normalize_entries(entries):
            if self._find(entry.name) < 0:
                self._entries.append(entry)
            else:
                logger.debug(f"Skipping duplicate entry: {entry.name}")

    def _find(self, name: str) -> int:
        for i, entry in enumerate(self._entries):
            if entry.name == name:
                return i
        return -1

    def _changed(self, reason: str) -> None:
        logger.debug(f"Roster {reason}")
        snapshot = self.snapshot()
        for listener in self._listeners:
            listener(snapshot)
        if self.event_bus is not None:
            self.event_bus.emit(Event(
                EventType.ROSTER_CHANGED,
                data={"count": len(snapshot), "reason": reason},
                source="roster",
            ))


class FavoriteSlots:
    """Fixed number of saved entry-list snapshots. Empty slots are None."""

    def __init__(self, slot_count: Optional[int] = None) -> None:
        if slot_count is None:
            slot_count = get_settings().favorite_slot_count
        self._slots: list[Optional[tuple[Entry, ...]]] = [None] * slot_count

    def __len__(self) -> int:
        return len(self._slots)

    def _valid(self, slot: int) -> bool:
        return isinstance(slot, int) and 0 <= slot < len(self._slots)

    def save(self, slot: int, entries: Iterable[Entry]) -> bool:
        if not self._valid(slot):
            return False
        self._slots[slot] = normalize_entries(entries)
        logger.info(f"Favorite {slot + 1} saved ({len(self._slots[slot])} entries)")
        return True

    def load(self, slot: int) -> Optional[list[Entry]]:
        """Copy of the saved list, or None for an unset or invalid slot."""
        if not self._valid(slot) or self._slots[slot] is None:
            return None
        return list(self._slots[slot])

    def has(self, slot: int) -> bool:
        return self._valid(slot) and self._slots[slot] is not None

    def clear(self, slot: int) -> bool:
        if not self._valid(slot):
            return False
        self._slots[slot] = None
        return True
