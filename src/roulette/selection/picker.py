"""Weighted random selection.

A single uniform draw in [0, 1) is scaled by the total enabled weight and
located on the running sum of weights. Ties on a boundary go to the
earlier entry; floating-point drift past the end falls back to the last
enabled entry, so a non-empty enabled set always yields a winner.
"""

from typing import Callable, Optional, Sequence
import random

import numpy as np

from roulette.selection.weights import Entry, clamp_weight

# Uniform float in [0, 1)
RandomSource = Callable[[], float]


def cumulative_weights(entries: Sequence[Entry]) -> np.ndarray:
    """Running sum of clamped weights, in entry order."""
    weights = np.fromiter(
        (clamp_weight(e.weight) for e in entries), dtype=float, count=len(entries)
    )
    return np.cumsum(weights)


def _locate(cumulative: np.ndarray, rand: RandomSource) -> int:
    """Index of the first cumulative bound >= roll."""
    total = float(cumulative[-1])
    if total <= 0:
        return 0

    roll = rand() * total
    idx = int(np.searchsorted(cumulative, roll, side="left"))
    return min(idx, len(cumulative) - 1)


def pick(entries: Sequence[Entry], rand: RandomSource = random.random) -> Optional[Entry]:
    """Pick one enabled entry with probability proportional to its weight.

    Returns:
        The chosen entry, or None when nothing is enabled
    """
    enabled = [e for e in entries if e.enabled]
    if not enabled:
        return None
    return enabled[_locate(cumulative_weights(enabled), rand)]


def pick_index(entries: Sequence[Entry], rand: RandomSource = random.random) -> int:
    """Like ``pick`` but returns the position in ``entries`` (-1 if none).

    Used by the arcade board, where the highlight is a slot position and
    disabled slots stay on the board.
    """
    selectable = [i for i, e in enumerate(entries) if e.enabled]
    if not selectable:
        return -1
    cumulative = cumulative_weights([entries[i] for i in selectable])
    return selectable[_locate(cumulative, rand)]
