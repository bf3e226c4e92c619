"""Tests for weight clamping, normalization and weighted picks."""

import math
import random

import pytest

from roulette.selection import (
    Entry,
    clamp_weight,
    cumulative_weights,
    normalize_entries,
    pick,
    pick_index,
)


@pytest.mark.parametrize("raw", [-5, 0, 0.05, 0.1, 0.5, 1, 9.99, 10, 15, 1e9, math.inf, -math.inf, math.nan])
def test_clamp_weight_stays_in_bounds_and_is_idempotent(raw):
    clamped = clamp_weight(raw)
    assert 0.1 <= clamped <= 10
    assert clamp_weight(clamped) == clamped


def test_clamp_weight_special_values():
    assert clamp_weight(math.nan) == 0.1
    assert clamp_weight(15) == 10
    assert clamp_weight(0.01) == 0.1
    assert clamp_weight(2.5) == 2.5


def test_normalize_drops_blank_names_and_clamps():
    raw = [
        Entry("  Temjin ", 1),
        Entry("  ", 3),
        Entry("Raiden", 15, enabled=False),
        Entry("", 1),
        Entry("Fei-Yen", math.nan),
    ]
    cleaned = normalize_entries(raw)
    assert [e.name for e in cleaned] == ["Temjin", "Raiden", "Fei-Yen"]
    assert [e.weight for e in cleaned] == [1, 10, 0.1]
    assert [e.enabled for e in cleaned] == [True, False, True]


def test_normalize_is_idempotent(entries):
    once = normalize_entries(entries + [Entry(" x ", 40)])
    assert normalize_entries(once) == once


def test_normalize_keeps_image_path():
    (entry,) = normalize_entries([Entry("Temjin", 1, True, "img/temjin.png")])
    assert entry.image_path == "img/temjin.png"


def test_pick_returns_none_without_enabled_entries():
    assert pick([], random.random) is None
    assert pick([Entry("A", enabled=False), Entry("B", enabled=False)], random.random) is None


def test_pick_always_returns_enabled_member(entries):
    entries = entries + [Entry("Off", 10, enabled=False)]
    enabled = [e for e in entries if e.enabled]
    rng = random.Random(99)
    for _ in range(500):
        assert pick(entries, rng.random) in enabled


def test_pick_walks_cumulative_weights():
    entries = [Entry("A", 1), Entry("B", 3)]
    # total 4: roll 0.8 -> A, roll 1.2 -> B
    assert pick(entries, lambda: 0.2).name == "A"
    assert pick(entries, lambda: 0.3).name == "B"
    assert pick(entries, lambda: 0.0).name == "A"


def test_pick_boundary_goes_to_earlier_entry():
    entries = [Entry("A", 1), Entry("B", 1)]
    # roll == 1.0 lands exactly on A's upper bound
    assert pick(entries, lambda: 0.5).name == "A"


def test_pick_falls_back_to_last_entry_past_total():
    entries = [Entry("A", 1), Entry("B", 1), Entry("C", 1, enabled=False)]
    assert pick(entries, lambda: 1.0).name == "B"
    assert pick(entries, lambda: 0.9999999999).name == "B"


def test_pick_ignores_disabled_weight():
    entries = [Entry("Heavy", 10, enabled=False), Entry("Light", 0.1)]
    assert pick(entries, lambda: 0.0).name == "Light"


def test_pick_uses_clamped_weights():
    # 0 clamps to 0.1 and 50 to 10: roll 0.5 * 10.1 lands in the second slot
    entries = [Entry("A", 0), Entry("B", 50)]
    assert pick(entries, lambda: 0.5).name == "B"
    assert cumulative_weights(entries).tolist() == pytest.approx([0.1, 10.1])


def test_pick_is_deterministic_for_a_seed(entries):
    first = random.Random(42)
    second = random.Random(42)
    a = [pick(entries, first.random).name for _ in range(50)]
    b = [pick(entries, second.random).name for _ in range(50)]
    assert a == b


def test_pick_distribution_follows_weights():
    entries = [Entry("A", 1), Entry("B", 3)]
    rng = random.Random(7)
    wins = sum(1 for _ in range(4000) if pick(entries, rng.random).name == "B")
    assert 0.70 < wins / 4000 < 0.80


def test_pick_index_reports_board_position():
    board = [Entry("A", enabled=False), Entry("B"), Entry("C")]
    assert pick_index(board, lambda: 0.0) == 1
    assert pick_index(board, lambda: 0.99) == 2
    assert pick_index([Entry("A", enabled=False)], lambda: 0.5) == -1
