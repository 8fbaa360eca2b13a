from __future__ import annotations

from typing import Callable, Dict, Iterable, Set, Tuple

from .board import Board
from .move import Square
from .piece import PieceKind
from .raycast import Direction, cast_ray


# All rules treat increasing rank as "forward"; Game orients the board so this
# holds for whichever side is being evaluated.
PAWN_START_RANK = 1
PAWN_PUSH: Direction = (0, 1)
PAWN_CAPTURE_DIRS: Tuple[Direction, ...] = ((1, 1), (-1, 1))

KNIGHT_OFFSETS: Tuple[Direction, ...] = (
    (1, 2),
    (2, 1),
    (2, -1),
    (1, -2),
    (-1, -2),
    (-2, -1),
    (-2, 1),
    (-1, 2),
)
BISHOP_DIRS: Tuple[Direction, ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: Tuple[Direction, ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))
KING_DIRS: Tuple[Direction, ...] = BISHOP_DIRS + ROOK_DIRS

RuleFn = Callable[[Board, Square], Set[Square]]


# --- Shared ray policies ---
def _step_quiet(board: Board, sq: Square, dirs: Iterable[Direction]) -> Set[Square]:
    out: Set[Square] = set()
    for d in dirs:
        ray = cast_ray(board, sq, d, 1)
        if not ray.is_hit and ray.point is not None:
            out.add(ray.point)
    return out


def _step_captures(board: Board, sq: Square, dirs: Iterable[Direction]) -> Set[Square]:
    out: Set[Square] = set()
    for d in dirs:
        ray = cast_ray(board, sq, d, 1)
        if ray.is_hit and ray.point is not None:
            out.add(ray.point)
    return out


def _slide_quiet(board: Board, sq: Square, dirs: Iterable[Direction]) -> Set[Square]:
    out: Set[Square] = set()
    for d in dirs:
        out |= cast_ray(board, sq, d).path
    return out


def _slide_captures(board: Board, sq: Square, dirs: Iterable[Direction]) -> Set[Square]:
    out: Set[Square] = set()
    for d in dirs:
        ray = cast_ray(board, sq, d)
        if ray.is_hit and ray.point is not None:
            out.add(ray.point)
    return out


# --- Per-kind rules ---
def pawn_moves(board: Board, sq: Square) -> Set[Square]:
    """Straight pushes only; a blocked push is never a capture."""
    moves: Set[Square] = set()
    pushes = (1, 2) if sq[1] == PAWN_START_RANK else (1,)
    for steps in pushes:
        ray = cast_ray(board, sq, PAWN_PUSH, steps)
        if not ray.is_hit and ray.point is not None:
            moves.add(ray.point)
    return moves


def pawn_captures(board: Board, sq: Square) -> Set[Square]:
    return _step_captures(board, sq, PAWN_CAPTURE_DIRS)


def knight_moves(board: Board, sq: Square) -> Set[Square]:
    return _step_quiet(board, sq, KNIGHT_OFFSETS)


def knight_captures(board: Board, sq: Square) -> Set[Square]:
    return _step_captures(board, sq, KNIGHT_OFFSETS)


def bishop_moves(board: Board, sq: Square) -> Set[Square]:
    return _slide_quiet(board, sq, BISHOP_DIRS)


def bishop_captures(board: Board, sq: Square) -> Set[Square]:
    return _slide_captures(board, sq, BISHOP_DIRS)


def rook_moves(board: Board, sq: Square) -> Set[Square]:
    return _slide_quiet(board, sq, ROOK_DIRS)


def rook_captures(board: Board, sq: Square) -> Set[Square]:
    return _slide_captures(board, sq, ROOK_DIRS)


def queen_moves(board: Board, sq: Square) -> Set[Square]:
    return bishop_moves(board, sq) | rook_moves(board, sq)


def queen_captures(board: Board, sq: Square) -> Set[Square]:
    return bishop_captures(board, sq) | rook_captures(board, sq)


def king_moves(board: Board, sq: Square) -> Set[Square]:
    return _step_quiet(board, sq, KING_DIRS)


def king_captures(board: Board, sq: Square) -> Set[Square]:
    return _step_captures(board, sq, KING_DIRS)


RULES: Dict[PieceKind, Tuple[RuleFn, RuleFn]] = {
    PieceKind.PAWN: (pawn_moves, pawn_captures),
    PieceKind.KNIGHT: (knight_moves, knight_captures),
    PieceKind.BISHOP: (bishop_moves, bishop_captures),
    PieceKind.ROOK: (rook_moves, rook_captures),
    PieceKind.QUEEN: (queen_moves, queen_captures),
    PieceKind.KING: (king_moves, king_captures),
}

_missing = set(PieceKind) - set(RULES)
if _missing:
    raise RuntimeError(f"no movement rules for: {sorted(k.name for k in _missing)}")


def quiet_moves(board: Board, sq: Square) -> Set[Square]:
    """Non-capturing destinations for the piece on ``sq`` (empty if none)."""
    piece = board[sq]
    if piece is None:
        return set()
    return RULES[piece.kind][0](board, sq)


def pseudo_captures(board: Board, sq: Square) -> Set[Square]:
    """Occupied squares the piece on ``sq`` attacks.

    The set is not filtered by colour: it may contain friendly pieces and
    kings of either side, so it doubles as the attacked-squares set for check
    detection.
    """
    piece = board[sq]
    if piece is None:
        return set()
    return RULES[piece.kind][1](board, sq)


def pseudo_moves(board: Board, sq: Square) -> Set[Square]:
    """Quiet moves plus captures, before any colour or check filtering."""
    piece = board[sq]
    if piece is None:
        return set()
    moves_fn, captures_fn = RULES[piece.kind]
    return moves_fn(board, sq) | captures_fn(board, sq)
