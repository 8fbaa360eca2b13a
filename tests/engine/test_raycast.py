from __future__ import annotations

import pytest

from src.engine.board import Board
from src.engine.move import str_to_square as sq
from src.engine.raycast import cast_ray


def test_unlimited_ray_runs_to_edge_on_empty_board() -> None:
    b = Board.empty()
    ray = cast_ray(b, sq("a1"), (1, 1))
    assert not ray.is_hit
    assert ray.point == sq("h8")
    assert ray.path == {sq(s) for s in ("b2", "c3", "d4", "e5", "f6", "g7", "h8")}


def test_ray_stops_on_occupied_square_and_excludes_it_from_path() -> None:
    b = Board.from_placement("8/8/8/p7/8/8/8/R7")
    ray = cast_ray(b, sq("a1"), (0, 1))
    assert ray.is_hit
    assert ray.point == sq("a5")
    assert ray.path == {sq("a2"), sq("a3"), sq("a4")}


def test_adjacent_hit_has_empty_path() -> None:
    b = Board.startpos()
    ray = cast_ray(b, sq("a1"), (0, 1))
    assert ray.is_hit
    assert ray.point == sq("a2")
    assert ray.path == frozenset()


def test_step_limit_bounds_the_walk() -> None:
    b = Board.empty()
    ray = cast_ray(b, sq("a1"), (0, 1), 2)
    assert not ray.is_hit
    assert ray.point == sq("a3")
    assert ray.path == {sq("a2"), sq("a3")}


@pytest.mark.parametrize(
    "origin,direction,steps",
    [
        ("h8", (1, 0), None),  # immediately off board
        ("a1", (-1, 2), 1),  # knight hop off board
        ("d4", (0, 1), 0),  # zero step limit
    ],
)
def test_zero_length_walk_reports_no_point(origin: str, direction, steps) -> None:
    ray = cast_ray(Board.empty(), sq(origin), direction, steps)
    assert not ray.is_hit
    assert ray.point is None
    assert ray.path == frozenset()


def test_edge_stop_keeps_last_reached_square() -> None:
    # Two steps allowed but only one fits on the board.
    ray = cast_ray(Board.empty(), sq("g1"), (1, 0), 2)
    assert not ray.is_hit
    assert ray.point == sq("h1")
    assert ray.path == {sq("h1")}


def test_knight_offset_jumps_over_pieces() -> None:
    b = Board.startpos()
    ray = cast_ray(b, sq("b1"), (1, 2), 1)
    assert not ray.is_hit
    assert ray.point == sq("c3")


def test_zero_direction_rejected() -> None:
    with pytest.raises(ValueError):
        cast_ray(Board.empty(), sq("d4"), (0, 0))
