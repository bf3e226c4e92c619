"""Entry type and weight normalization.

``clamp_weight`` is the single source of truth for weight bounds; every
place that reads or writes a weight goes through it.
"""

from dataclasses import dataclass, replace
from typing import Iterable, Optional
import math

MIN_WEIGHT = 0.1
MAX_WEIGHT = 10.0
DEFAULT_WEIGHT = 1.0


@dataclass(frozen=True)
class Entry:
    """One selectable name on the wheel or arcade board.

    Attributes:
        name: Display name (trimmed, non-empty once normalized)
        weight: Relative chance, clamped to [0.1, 10] once normalized
        enabled: Whether the entry takes part in spins
        image_path: Optional portrait path, carried through untouched
    """

    name: str
    weight: float = DEFAULT_WEIGHT
    enabled: bool = True
    image_path: Optional[str] = None


def clamp_weight(weight: float) -> float:
    """Clamp a weight to [0.1, 10]. NaN maps to the floor."""
    if math.isnan(weight) or weight < MIN_WEIGHT:
        return MIN_WEIGHT
    return MAX_WEIGHT if weight > MAX_WEIGHT else weight


def normalize_entry(entry: Entry) -> Optional[Entry]:
    """Trim the name and clamp the weight. Returns None for blank names."""
    name = (entry.name or "").strip()
    if not name:
        return None
    return replace(entry, name=name, weight=clamp_weight(float(entry.weight)))


def normalize_entries(entries: Iterable[Entry]) -> tuple[Entry, ...]:
    """Produce a cleaned, order-preserving snapshot of ``entries``.

    Blank names are dropped, weights clamped, ``enabled`` kept as-is.
    Normalizing an already normalized snapshot returns an equal one.
    """
    cleaned = (normalize_entry(e) for e in entries)
    return tuple(e for e in cleaned if e is not None)


def enabled_entries(entries: Iterable[Entry]) -> list[Entry]:
    """Filter to the entries that take part in a spin."""
    return [e for e in entries if e.enabled]
