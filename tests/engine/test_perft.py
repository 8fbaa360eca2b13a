from __future__ import annotations

import pytest

from src.engine.game import Game, STARTPOS
from src.engine.perft import divide, perft


def test_perft_startpos_depths_0_3() -> None:
    g = Game.from_position(STARTPOS)
    assert perft(g, 0) == 1
    assert perft(g, 1) == 20
    assert perft(g, 2) == 400
    assert perft(g, 3) == 8902


def test_perft_leaves_game_untouched() -> None:
    g = Game.from_position(STARTPOS)
    perft(g, 2)
    assert g.to_position() == STARTPOS


def test_divide_sums_to_perft() -> None:
    g = Game.from_position(STARTPOS)
    counts = divide(g, 2)
    assert len(counts) == 20
    assert counts["e2e4"] == 20
    assert sum(counts.values()) == 400


def test_perft_terminal_positions_have_no_children() -> None:
    assert perft(Game.from_position("7k/8/8/8/8/8/5PPP/r5K1 w"), 1) == 0
    assert perft(Game.from_position("7k/5Q2/6K1/8/8/8/8/8 b"), 2) == 0


def test_perft_negative_depth_rejected() -> None:
    with pytest.raises(ValueError):
        perft(Game.new(), -1)
