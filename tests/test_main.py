"""Tests for the command-line entry point."""

import pytest

from roulette.main import EXIT_NO_ENTRIES, build_parser, main, parse_entry
from roulette.selection import Entry


@pytest.mark.parametrize("token,expected", [
    ("Alice", Entry("Alice")),
    ("Bob:2", Entry("Bob", 2)),
    (" Carol : 0.5", Entry("Carol", 0.5)),
    ("10:30", Entry("10", 30)),
    ("Team:Red", Entry("Team:Red")),
    ("Dave:", Entry("Dave:")),
])
def test_parse_entry(token, expected):
    assert parse_entry(token) == expected


def test_parser_options():
    args = build_parser().parse_args(["--arcade", "--max-time", "3", "--seed", "7", "A", "B:2"])
    assert args.arcade
    assert args.max_time == 3.0
    assert args.decel_time is None
    assert args.seed == 7
    assert args.names == ["A", "B:2"]


def test_main_exits_when_nothing_can_spin(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["   "])
    assert exc.value.code == EXIT_NO_ENTRIES
    assert "No eligible entries" in capsys.readouterr().err


def test_main_prints_winner(capsys):
    main(["--max-time", "1", "--decel-time", "0.2", "--seed", "3", "Solo"])
    assert capsys.readouterr().out.strip() == "Solo"
