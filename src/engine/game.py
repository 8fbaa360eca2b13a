from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, List, Optional, Set, Tuple

from .board import STARTPOS_PLACEMENT, Board
from .errors import EmptySquareError, MissingKingError
from .move import MoveRecord, Square, check_square, square_to_str
from .piece import Piece, PieceKind, Side
from .rules import pseudo_captures, pseudo_moves


logger = logging.getLogger(__name__)


STARTPOS = f"{STARTPOS_PLACEMENT} w"


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


class Game:
    """Board plus side to move, with the full legality and turn logic.

    Responsibility: answer legal-move, check and mate queries and commit moves.

    Notes:
    - Internally the board is always oriented so the side to move advances
      toward increasing rank; it is flipped after every committed move. The
      movement rules therefore never look at colour.
    - Every public method takes and returns absolute squares (white's first
      rank is rank 0) regardless of the internal orientation.
    - Not reentrant: legality checks mutate the board and restore it. Callers
      sharing a game across threads must serialize access.
    """

    def __init__(self, board: Optional[Board] = None, player_to_move: Side = Side.WHITE) -> None:
        board = Board.startpos() if board is None else board.copy()
        for side in Side:
            n = board.count(Piece(PieceKind.KING, side))
            if n != 1:
                raise ValueError(f"expected exactly one {side.name.lower()} king, found {n}")
        self._board = board
        self._player_to_move = player_to_move
        if player_to_move is Side.BLACK:
            self._board.flip()

    @classmethod
    def new(cls) -> "Game":
        return cls()

    @classmethod
    def from_position(cls, text: str) -> "Game":
        """Create a game from ``"<placement> [w|b]"``.

        Additional FEN fields (castling, en passant, clocks) are accepted and
        ignored; the engine does not model them.

        Raises:
            ValueError: If the placement or side field is invalid, or either
                side does not have exactly one king.
        """
        if not text or not isinstance(text, str):
            raise ValueError("position must be a non-empty string")
        parts = text.split()
        if not parts:
            raise ValueError("position must be a non-empty string")
        board = Board.from_placement(parts[0])
        side = Side.WHITE
        if len(parts) > 1:
            if parts[1] not in ("w", "b"):
                raise ValueError("side to move must be 'w' or 'b'")
            side = Side(parts[1])
        return cls(board, side)

    def to_position(self) -> str:
        return f"{self.board().to_placement()} {self._player_to_move.value}"

    def copy(self) -> "Game":
        return Game(self.board(), self._player_to_move)

    # --- Queries ---
    def board(self) -> Board:
        """Absolute-orientation copy of the board (white's first rank at rank 0)."""
        b = self._board.copy()
        if self._player_to_move is Side.BLACK:
            b.flip()
        return b

    def player_to_move(self) -> Side:
        return self._player_to_move

    def get_piece(self, sq: Square) -> Optional[Piece]:
        return self._board[self._orient(sq)]

    def get_legal_moves(self, sq: Square) -> Set[Square]:
        """Legal destinations for the piece on ``sq``; empty for empty or enemy squares."""
        return {self._orient(to) for to in self._legal_moves(self._orient(sq))}

    def legal_moves(self) -> List[Tuple[Square, Square]]:
        """Every legal ``(from, to)`` pair for the side to move, sorted by absolute squares."""
        out: List[Tuple[Square, Square]] = []
        for sq in self._own_squares():
            for to in self._legal_moves(sq):
                out.append((self._orient(sq), self._orient(to)))
        return sorted(out)

    def is_legal_move(self, from_sq: Square, to_sq: Square) -> bool:
        return self._is_legal(self._orient(from_sq), self._orient(to_sq))

    def in_check(self) -> bool:
        """Return True if the side to move's king is attacked."""
        return self._in_check()

    def has_any_legal_move(self) -> bool:
        """Return True if the side to move has at least one legal move.

        Stops at the first piece with a non-empty legal-move set.
        """
        for sq in self._own_squares():
            if self._legal_moves(sq):
                return True
        return False

    def is_checkmate(self) -> bool:
        return not self.has_any_legal_move() and self._in_check()

    def is_stalemate(self) -> bool:
        return not self.has_any_legal_move() and not self._in_check()

    def status(self) -> GameStatus:
        checked = self._in_check()
        if not self.has_any_legal_move():
            return GameStatus.CHECKMATE if checked else GameStatus.STALEMATE
        return GameStatus.CHECK if checked else GameStatus.IN_PROGRESS

    # --- Commands ---
    def try_make_move(self, from_sq: Square, to_sq: Square) -> bool:
        """Commit ``from_sq -> to_sq`` if legal.

        Returns:
            bool: True if the move was applied and the turn passed; False if
                it was rejected, in which case nothing changed.
        """
        src, dst = self._orient(from_sq), self._orient(to_sq)
        if not self._is_legal(src, dst):
            logger.debug(
                "rejected move %s%s for %s",
                square_to_str(from_sq),
                square_to_str(to_sq),
                self._player_to_move.name.lower(),
            )
            return False
        record = self._apply(src, dst)
        logger.debug(
            "%s played %s %s%s%s",
            self._player_to_move.name.lower(),
            record.moved,
            square_to_str(from_sq),
            square_to_str(to_sq),
            f" capturing {record.captured}" if record.captured else "",
        )
        self._player_to_move = self._player_to_move.opponent
        self._board.flip()
        return True

    # --- Orientation ---
    def _orient(self, sq: Square) -> Square:
        """Map between absolute and internal squares (the mapping is its own inverse)."""
        file, rank = check_square(sq)
        if self._player_to_move is Side.BLACK:
            return file, 7 - rank
        return file, rank

    @contextmanager
    def _opponent_view(self) -> Iterator[None]:
        """Flip the board for the opponent's rules and always flip it back."""
        self._board.flip()
        try:
            yield
        finally:
            self._board.flip()

    # --- Check detection ---
    def _find_king(self) -> Square:
        sq = self._board.find(Piece(PieceKind.KING, self._player_to_move))
        if sq is None:
            raise MissingKingError(f"no {self._player_to_move.name.lower()} king on board")
        return sq

    def _in_check(self) -> bool:
        with self._opponent_view():
            king = self._find_king()
            enemy = self._player_to_move.opponent
            attackers = [sq for sq, p in self._board.occupied() if p.side is enemy]
            return any(king in pseudo_captures(self._board, sq) for sq in attackers)

    # --- Legality ---
    def _own_squares(self) -> List[Square]:
        side = self._player_to_move
        return [sq for sq, p in self._board.occupied() if p.side is side]

    def _can_land_on(self, sq: Square) -> bool:
        target = self._board[sq]
        if target is None:
            return True
        return not target.is_king and target.side is not self._player_to_move

    def _is_legal(self, src: Square, dst: Square) -> bool:
        piece = self._board[src]
        if piece is None or piece.side is not self._player_to_move:
            return False
        if dst not in pseudo_moves(self._board, src):
            return False
        return self._keeps_king_safe(src, dst)

    def _keeps_king_safe(self, src: Square, dst: Square) -> bool:
        # Assumes src holds a piece of the side to move and dst is pseudo-legal.
        if not self._can_land_on(dst):
            return False
        with self._simulate(src, dst):
            return not self._in_check()

    def _legal_moves(self, sq: Square) -> Set[Square]:
        piece = self._board[sq]
        if piece is None or piece.side is not self._player_to_move:
            return set()
        return {to for to in pseudo_moves(self._board, sq) if self._keeps_king_safe(sq, to)}

    # --- Move application ---
    def _apply(self, src: Square, dst: Square) -> MoveRecord:
        moved = self._board[src]
        if moved is None:
            raise EmptySquareError(f"no piece to move on {src}")
        record = MoveRecord(src, dst, moved, self._board[dst])
        self._board[dst] = moved
        self._board[src] = None
        return record

    def _restore(self, record: MoveRecord) -> None:
        self._board[record.to_sq] = record.captured
        self._board[record.from_sq] = record.moved

    @contextmanager
    def _simulate(self, src: Square, dst: Square) -> Iterator[MoveRecord]:
        """Apply a move for the duration of the block, then undo it."""
        record = self._apply(src, dst)
        try:
            yield record
        finally:
            self._restore(record)
