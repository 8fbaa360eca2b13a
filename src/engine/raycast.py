from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from .board import Board
from .move import Square, is_on_board


Direction = Tuple[int, int]


@dataclass(frozen=True)
class Raycast:
    """Result of walking a direction from a square.

    Attributes:
        is_hit (bool): The walk stopped on an occupied square.
        point (Optional[Square]): Where the walk stopped; ``None`` when no
            step was taken.
        path (FrozenSet[Square]): Empty squares crossed, excluding a hit square.
    """

    is_hit: bool
    point: Optional[Square]
    path: FrozenSet[Square]


def cast_ray(
    board: Board, origin: Square, direction: Direction, steps: Optional[int] = None
) -> Raycast:
    """Walk ``direction`` from ``origin`` one step at a time.

    Args:
        board (Board): Grid to probe.
        origin (Square): Starting square (not itself examined).
        direction (Direction): ``(dx, dy)`` added per step; a unit vector for
            sliders and kings, a knight offset for knight hops.
        steps (Optional[int]): Maximum number of steps; ``None`` walks until
            the board edge or the first occupied square.

    Returns:
        Raycast: Hit flag, landing square and crossed empty squares.

    Raises:
        ValueError: If ``direction`` is ``(0, 0)``.

    Notes:
        A step that would leave the board is never taken; the landing point is
        then the last square reached, or ``None`` when nothing was reached.
    """
    dx, dy = direction
    if dx == 0 and dy == 0:
        raise ValueError("ray direction must be non-zero")
    x, y = origin
    path = []
    point: Optional[Square] = None
    taken = 0
    while steps is None or taken < steps:
        nx, ny = x + dx, y + dy
        if not is_on_board(nx, ny):
            break
        x, y = nx, ny
        point = (x, y)
        if board.tiles[y][x] is not None:
            return Raycast(True, point, frozenset(path))
        path.append(point)
        taken += 1
    return Raycast(False, point, frozenset(path))
