from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .piece import Piece


# (file, rank), both 0..7; a1 = (0, 0), h8 = (7, 7).
Square = Tuple[int, int]


@dataclass(frozen=True)
class MoveRecord:
    """What a single move displaced, enough to put it back.

    Attributes:
        from_sq (Square): Origin square.
        to_sq (Square): Destination square.
        moved (Piece): The piece that moved.
        captured (Optional[Piece]): Whatever occupied ``to_sq`` before, if any.
    """

    from_sq: Square
    to_sq: Square
    moved: Piece
    captured: Optional[Piece] = None


def is_on_board(file: int, rank: int) -> bool:
    return 0 <= file < 8 and 0 <= rank < 8


def check_square(sq: Square) -> Square:
    """Validate a square tuple and return it unchanged.

    Raises:
        ValueError: If ``sq`` is not a pair of in-range integers.
    """
    if (
        not isinstance(sq, tuple)
        or len(sq) != 2
        or not all(isinstance(c, int) and not isinstance(c, bool) for c in sq)
        or not is_on_board(sq[0], sq[1])
    ):
        raise ValueError(f"invalid square: {sq!r}")
    return sq


def str_to_square(s: str) -> Square:
    """Convert algebraic notation into a ``(file, rank)`` square.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        Square: Zero-based ``(file, rank)``.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    return ord(s[0]) - ord("a"), int(s[1]) - 1


def square_to_str(sq: Square) -> str:
    """Convert a ``(file, rank)`` square into algebraic notation.

    Raises:
        ValueError: If ``sq`` is off the board.
    """
    file, rank = check_square(sq)
    return chr(ord("a") + file) + str(rank + 1)


def parse_move(text: str) -> Tuple[Square, Square]:
    """Parse a coordinate move such as ``"e2e4"`` into two squares.

    Raises:
        ValueError: If the string is not exactly two squares.
    """
    if len(text) != 4:
        raise ValueError(f"invalid move length: {text!r}")
    return str_to_square(text[0:2]), str_to_square(text[2:4])
