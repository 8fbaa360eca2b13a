from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from .move import Square
from .piece import Piece, PieceKind, Side


STARTPOS_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

_BACK_RANK = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)

Snapshot = Tuple[Tuple[Optional[Piece], ...], ...]


class Board:
    """8x8 piece grid addressed by ``(file, rank)`` squares.

    Notes:
    - ``tiles[rank][file]``; rank 0 is the bottom row of the current
      orientation, not necessarily white's first rank.
    - ``flip()`` reverses the rank axis in place. The grid has no notion of
      which side is "home"; ``Game`` keeps track of that.
    """

    __slots__ = ("tiles",)

    def __init__(self, tiles: Optional[List[List[Optional[Piece]]]] = None) -> None:
        if tiles is None:
            tiles = [[None] * 8 for _ in range(8)]
        if len(tiles) != 8 or any(len(row) != 8 for row in tiles):
            raise ValueError("board must have 8 ranks of 8 files")
        self.tiles: List[List[Optional[Piece]]] = [list(row) for row in tiles]

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board set up with the standard starting arrangement."""
        b = cls()
        for file, kind in enumerate(_BACK_RANK):
            b.tiles[0][file] = Piece(kind, Side.WHITE)
            b.tiles[1][file] = Piece(PieceKind.PAWN, Side.WHITE)
            b.tiles[6][file] = Piece(PieceKind.PAWN, Side.BLACK)
            b.tiles[7][file] = Piece(kind, Side.BLACK)
        return b

    @classmethod
    def from_placement(cls, placement: str) -> "Board":
        """Create a board from the piece-placement field of a FEN string.

        Args:
            placement (str): Ranks 8..1 separated by ``/``, e.g.
                ``"4k3/8/8/8/8/8/8/4K3"``.

        Returns:
            Board: Board with rank index 0 holding white's first rank.

        Raises:
            ValueError: If the field does not describe exactly 8 ranks of 8
                squares or contains an unknown piece letter.
        """
        if not placement or not isinstance(placement, str):
            raise ValueError("placement must be a non-empty string")
        ranks = placement.strip().split("/")
        if len(ranks) != 8:
            raise ValueError("placement must have 8 ranks")
        b = cls()
        for rank_idx, rank in enumerate(ranks[::-1]):
            file_idx = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in placement rank")
                    file_idx += n
                else:
                    if file_idx >= 8:
                        raise ValueError("too many squares in placement rank")
                    b.tiles[rank_idx][file_idx] = Piece.from_char(ch)
                    file_idx += 1
            if file_idx != 8:
                raise ValueError("rank does not sum to 8 squares in placement")
        return b

    def to_placement(self) -> str:
        """Serialize the grid as a FEN piece-placement field (top row first)."""
        rows: List[str] = []
        for rank_idx in range(7, -1, -1):
            run = 0
            row: List[str] = []
            for piece in self.tiles[rank_idx]:
                if piece is None:
                    run += 1
                    continue
                if run > 0:
                    row.append(str(run))
                    run = 0
                row.append(str(piece))
            if run > 0:
                row.append(str(run))
            rows.append("".join(row))
        return "/".join(rows)

    # --- Element access ---
    def __getitem__(self, sq: Square) -> Optional[Piece]:
        return self.tiles[sq[1]][sq[0]]

    def __setitem__(self, sq: Square, piece: Optional[Piece]) -> None:
        self.tiles[sq[1]][sq[0]] = piece

    def is_empty(self, sq: Square) -> bool:
        return self.tiles[sq[1]][sq[0]] is None

    def occupied(self) -> Iterator[Tuple[Square, Piece]]:
        """Yield ``(square, piece)`` for every occupied square, rank-major."""
        for rank in range(8):
            row = self.tiles[rank]
            for file in range(8):
                piece = row[file]
                if piece is not None:
                    yield (file, rank), piece

    def find(self, piece: Piece) -> Optional[Square]:
        """First square holding ``piece`` in rank-major, file-minor order."""
        for sq, p in self.occupied():
            if p == piece:
                return sq
        return None

    def count(self, piece: Piece) -> int:
        return sum(1 for _, p in self.occupied() if p == piece)

    # --- Orientation ---
    def flip(self) -> None:
        """Reverse the rank axis in place (rank r becomes rank 7 - r)."""
        self.tiles.reverse()

    # --- Copying / comparison ---
    def copy(self) -> "Board":
        return Board(self.tiles)

    def snapshot(self) -> Snapshot:
        """Hashable, immutable view of the grid for comparisons."""
        return tuple(tuple(row) for row in self.tiles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.tiles == other.tiles

    def __repr__(self) -> str:
        rows: List[str] = []
        for rank in range(7, -1, -1):
            cells = [str(p) if p else "." for p in self.tiles[rank]]
            rows.append(f"{rank + 1} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
