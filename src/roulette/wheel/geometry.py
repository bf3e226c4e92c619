"""Wheel segment geometry and pointer lookup.

Segments are built once per rebuild from the enabled, normalized entries.
Each spans an angle proportional to its weight, in entry order, and
together they partition [0, 2pi). The pointer sits at the top of the
wheel while the wheel rotates under it, so the angle it reads is
``-rotation - pi/2``.
"""

from dataclasses import dataclass
from typing import Iterable, Optional
import logging
import math

import numpy as np

from roulette.selection import Entry, cumulative_weights, enabled_entries, normalize_entries

logger = logging.getLogger(__name__)

TAU = math.pi * 2


@dataclass(frozen=True)
class Segment:
    """An angular slice of the wheel owned by one entry (radians)."""

    name: str
    start: float
    end: float

    @property
    def span(self) -> float:
        return self.end - self.start

    @property
    def mid(self) -> float:
        return (self.start + self.end) / 2

    def contains(self, angle: float) -> bool:
        return self.start <= angle < self.end


def normalize_angle(angle: float) -> float:
    """Wrap an angle into [0, 2pi)."""
    wrapped = angle % TAU
    # -tiny % TAU rounds up to TAU
    return 0.0 if wrapped >= TAU else wrapped


def pointer_angle(rotation: float) -> float:
    """Wheel-local angle under the fixed top pointer."""
    return normalize_angle(-rotation - math.pi / 2)


def build_segments(entries: Iterable[Entry]) -> tuple[Segment, ...]:
    """Build the segment table for the enabled, normalized ``entries``."""
    active = enabled_entries(normalize_entries(entries))
    if not active:
        return ()

    cumulative = cumulative_weights(active)
    total = float(cumulative[-1])
    if total <= 0:
        return (Segment(active[0].name, 0.0, TAU),)

    ends = TAU * cumulative / total
    starts = np.concatenate(([0.0], ends[:-1]))
    return tuple(
        Segment(entry.name, float(start), float(end))
        for entry, start, end in zip(active, starts, ends)
    )


class WheelGeometry:
    """Holds the current segment table and answers pointer queries."""

    def __init__(self, entries: Iterable[Entry] = ()) -> None:
        self._segments: tuple[Segment, ...] = ()
        self._ends = np.empty(0)
        self.rebuild(entries)

    def rebuild(self, entries: Iterable[Entry]) -> None:
        """Re-derive segments from a snapshot of entries."""
        self._segments = build_segments(entries)
        self._ends = np.array([s.end for s in self._segments], dtype=float)
        logger.debug(f"Wheel rebuilt with {len(self._segments)} segments")

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._segments

    @property
    def has_segments(self) -> bool:
        return bool(self._segments)

    def segment_at(self, rotation: float) -> Optional[Segment]:
        """Segment under the pointer for a given wheel rotation."""
        if not self._segments:
            return None
        angle = pointer_angle(rotation)
        idx = int(np.searchsorted(self._ends, angle, side="right"))
        return self._segments[min(idx, len(self._segments) - 1)]

    def name_at(self, rotation: float) -> str:
        """Name under the pointer, or an empty string for an empty wheel."""
        segment = self.segment_at(rotation)
        return segment.name if segment else ""
