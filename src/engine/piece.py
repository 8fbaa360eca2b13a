from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class Side(Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self is Side.WHITE else Side.WHITE


class PieceKind(Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


_UNICODE: Dict[Tuple["PieceKind", "Side"], str] = {
    (PieceKind.PAWN, Side.WHITE): "♙",
    (PieceKind.KNIGHT, Side.WHITE): "♘",
    (PieceKind.BISHOP, Side.WHITE): "♗",
    (PieceKind.ROOK, Side.WHITE): "♖",
    (PieceKind.QUEEN, Side.WHITE): "♕",
    (PieceKind.KING, Side.WHITE): "♔",
    (PieceKind.PAWN, Side.BLACK): "♟",
    (PieceKind.KNIGHT, Side.BLACK): "♞",
    (PieceKind.BISHOP, Side.BLACK): "♝",
    (PieceKind.ROOK, Side.BLACK): "♜",
    (PieceKind.QUEEN, Side.BLACK): "♛",
    (PieceKind.KING, Side.BLACK): "♚",
}


@dataclass(frozen=True)
class Piece:
    """Immutable piece value.

    Attributes:
        kind (PieceKind): What the piece is.
        side (Side): Who owns it.
    """

    kind: PieceKind
    side: Side

    def __str__(self) -> str:
        """FEN letter: uppercase for white, lowercase for black."""
        ch = self.kind.value
        return ch.upper() if self.side is Side.WHITE else ch

    @classmethod
    def from_char(cls, ch: str) -> "Piece":
        """Build a piece from its FEN letter.

        Raises:
            ValueError: If ``ch`` is not one of ``PNBRQKpnbrqk``.
        """
        if len(ch) != 1:
            raise ValueError(f"invalid piece character: {ch!r}")
        try:
            kind = PieceKind(ch.lower())
        except ValueError:
            raise ValueError(f"invalid piece character: {ch!r}") from None
        side = Side.WHITE if ch.isupper() else Side.BLACK
        return cls(kind, side)

    @property
    def symbol(self) -> str:
        return _UNICODE[(self.kind, self.side)]

    @property
    def is_king(self) -> bool:
        return self.kind is PieceKind.KING
