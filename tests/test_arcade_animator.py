"""Tests for the arcade light chase and the winner blink."""

import pytest

from roulette.arcade import ArcadeAnimator
from roulette.core.events import EventType
from roulette.core.state import ArcadePhase
from roulette.selection import Entry

from conftest import history_types


@pytest.fixture
def arcade(scheduler, rand, bus, arcade_settings, timing, entries):
    return ArcadeAnimator(scheduler, rand, bus, arcade_settings, timing, entries)


def test_start_without_enabled_entries(scheduler, rand, bus, arcade_settings, timing):
    arcade = ArcadeAnimator(
        scheduler, rand, bus, arcade_settings, timing,
        [Entry("A", enabled=False), Entry("B", enabled=False)],
    )
    assert arcade.start() is None
    assert arcade.phase == ArcadePhase.IDLE
    assert history_types(bus) == [EventType.NO_ELIGIBLE_ENTRIES]
    assert scheduler.pending == 0


def test_start_with_empty_board(scheduler, rand, bus, arcade_settings, timing):
    arcade = ArcadeAnimator(scheduler, rand, bus, arcade_settings, timing)
    assert arcade.start() is None
    assert arcade.pick_current_name() == ""


def test_start_sets_tick_budget(arcade, names):
    plan = arcade.start(4, 0.8)
    assert (plan.max_time, plan.decel_time) == pytest.approx((4, 0.8))
    assert arcade.state.ticks_remaining == 50
    assert arcade.state.decel_ticks == 10
    assert arcade.phase == ArcadePhase.RUNNING
    assert arcade.pick_current_name() in names


def test_start_while_running_is_ignored(arcade):
    assert arcade.start(4, 0.8) is not None
    assert arcade.start(4, 0.8) is None


def test_stopping_phase_starts_at_decel_budget(arcade, scheduler):
    arcade.start(4, 0.8)
    scheduler.advance(3.0)
    assert arcade.phase == ArcadePhase.RUNNING
    scheduler.advance(0.25)
    assert arcade.phase == ArcadePhase.STOPPING
    assert arcade.state.stopping
    scheduler.run_until_idle()
    assert arcade.phase == ArcadePhase.IDLE
    assert not arcade.is_running


def test_interval_ramps_while_stopping(arcade, scheduler, bus):
    intervals = []
    bus.subscribe(EventType.HIGHLIGHT_CHANGED, lambda e: intervals.append(arcade.state.tick_interval_ms))
    arcade.start(4, 0.8)
    scheduler.run_until_idle()
    assert len(intervals) == 46
    assert set(intervals[:-5]) == {80}
    assert intervals[-5:] == pytest.approx([80, 124, 168, 212, 256])
    assert arcade.state.tick_interval_ms == 80


def test_only_enabled_slots_light_up(scheduler, rand, bus, arcade_settings, timing):
    board = [Entry("A"), Entry("B", enabled=False), Entry("C")]
    arcade = ArcadeAnimator(scheduler, rand, bus, arcade_settings, timing, board)
    arcade.start(3, 1)
    scheduler.run_until_idle()
    lit = {e.data["index"] for e in bus.get_history(EventType.HIGHLIGHT_CHANGED, limit=1000)}
    assert lit <= {0, 2}


def test_winner_is_last_highlight(arcade, scheduler, bus):
    winners = []
    arcade.set_on_finalize(winners.append)
    arcade.start(2, 0.5)
    scheduler.run_until_idle()
    last = bus.get_history(EventType.HIGHLIGHT_CHANGED, limit=1)[0]
    (finalized,) = bus.get_history(EventType.SPIN_FINALIZED)
    assert winners == [last.data["current"]]
    assert finalized.data["winner"] == arcade.last_winner == last.data["current"]
    assert finalized.data["index"] == last.data["index"]


def test_request_stop_caps_budget(arcade, scheduler, names):
    arcade.start(10, 0.8)
    scheduler.advance(0.5)
    assert arcade.request_stop() is True
    assert arcade.phase == ArcadePhase.STOPPING
    assert arcade.state.ticks_remaining <= arcade.state.decel_ticks
    assert arcade.request_stop() is False
    scheduler.run_until_idle()
    assert arcade.phase == ArcadePhase.IDLE
    assert arcade.last_winner in names
    # five stopping ticks rather than the rest of a 125-tick budget
    assert scheduler.time() < 4.0


def test_request_decel_is_stop(arcade):
    assert arcade.request_decel() is False
    arcade.start(5, 1)
    assert arcade.request_decel() is True


def test_state_change_callbacks(arcade, scheduler):
    changes = []
    arcade.set_on_state_change(lambda running, info: changes.append((running, info["stop_enabled"])))
    arcade.start(2, 0.5)
    scheduler.run_until_idle()
    assert changes == [(True, True), (True, False), (False, False)]


def test_rebuild_applies_on_next_tick(arcade, scheduler, bus):
    arcade.start(3, 1)
    scheduler.advance(0.1)
    arcade.rebuild([Entry("A", enabled=False), Entry("B", enabled=False), Entry("C")])
    bus.clear_history()
    scheduler.run_until_idle()
    lit = {e.data["index"] for e in bus.get_history(EventType.HIGHLIGHT_CHANGED, limit=1000)}
    assert lit == {2}
    assert arcade.last_winner == "C"


def test_losing_every_entry_mid_run(arcade, scheduler, bus):
    winners = []
    arcade.set_on_finalize(winners.append)
    arcade.start(5, 1)
    scheduler.advance(0.1)
    arcade.rebuild([Entry("A", enabled=False)])
    scheduler.advance(0.1)
    assert arcade.phase == ArcadePhase.IDLE
    assert winners == [""]
    assert arcade.pick_current_name() == ""
    assert bus.get_history(EventType.NO_ELIGIBLE_ENTRIES)
    assert not arcade.blink.active
    assert scheduler.pending == 0


def test_winner_blinks_then_settles(arcade, scheduler, bus):
    arcade.start(2, 0.5)
    scheduler.run_until_idle(max_seconds=2.9)
    assert arcade.phase == ArcadePhase.IDLE
    assert arcade.blink.active
    assert arcade.blink.index == arcade.state.current_index
    scheduler.run_until_idle()
    assert not arcade.blink.active
    assert arcade.blink.visible
    assert len(bus.get_history(EventType.BLINK_TOGGLED, limit=100)) >= 7
    assert len(bus.get_history(EventType.BLINK_ENDED)) == 1


def test_restart_cancels_blink(arcade, scheduler):
    arcade.start(1, 0.2)
    scheduler.run_until_idle(max_seconds=1.5)
    assert arcade.blink.active
    arcade.start(1, 0.2)
    assert not arcade.blink.active
    assert arcade.blink.visible


def test_decel_budget_uses_corrected_decel(arcade):
    plan = arcade.start(5, 6)
    assert plan.decel_time == pytest.approx(2.0)
    assert arcade.state.decel_ticks == 25


def test_shrinking_board_relights_at_once(arcade, scheduler, bus):
    arcade.start(3, 1)
    scheduler.advance(0.1)
    bus.clear_history()
    arcade.rebuild([Entry("Only")])
    assert arcade.state.current_index == 0
    assert arcade.pick_current_name() == "Only"
    arcade.rebuild([Entry("Off", enabled=False), Entry("On")])
    assert arcade.state.current_index == 1
    assert arcade.pick_current_name() == "On"
    assert bus.get_history(EventType.HIGHLIGHT_CHANGED, limit=1)[0].data["current"] == "On"


def test_rebuild_keeps_lit_slot_that_stays_enabled(arcade, scheduler, bus):
    arcade.start(3, 1)
    scheduler.advance(0.1)
    index = arcade.state.current_index
    bus.clear_history()
    arcade.rebuild(arcade.entries)
    assert arcade.state.current_index == index
    assert bus.get_history(EventType.HIGHLIGHT_CHANGED) == []
