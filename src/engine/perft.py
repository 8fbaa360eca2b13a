from __future__ import annotations

from typing import Dict

from .game import Game
from .move import square_to_str


def perft(game: Game, depth: int) -> int:
    """Compute perft node count for ``game`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Children are played on copies, so ``game`` is left untouched.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    nodes = 0
    for from_sq, to_sq in game.legal_moves():
        if depth == 1:
            nodes += 1
            continue
        child = game.copy()
        child.try_make_move(from_sq, to_sq)
        nodes += perft(child, depth - 1)
    return nodes


def divide(game: Game, depth: int) -> Dict[str, int]:
    """Per-root-move perft counts keyed by coordinate move (e.g. ``"e2e4"``)."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    out: Dict[str, int] = {}
    for from_sq, to_sq in game.legal_moves():
        child = game.copy()
        child.try_make_move(from_sq, to_sq)
        out[square_to_str(from_sq) + square_to_str(to_sq)] = perft(child, depth - 1)
    return out
