from __future__ import annotations

import logging
import sys
from typing import Callable, Iterable, Optional, Set

from ...engine.game import Game, GameStatus
from ...engine.move import Square
from ...engine.piece import Side
from .screen import CLEAR, Rgb, Screen


logger = logging.getLogger(__name__)

Writer = Callable[[str], None]

FILE_CHARS = "abcdefgh"
RANK_CHARS = "12345678"

BACKDROP = Rgb(48, 48, 64)
LIGHT = Rgb(196, 196, 196)
DARK = Rgb(32, 32, 32)
LABEL = Rgb(128, 128, 196)
SELECTED = Rgb(255, 255, 196)
TARGET = Rgb(128, 128, 196)
CURSOR = Rgb(232, 232, 196)
WHITE_PIECE = Rgb(255, 255, 255)
BLACK_PIECE = Rgb(0, 0, 0)

# Board origin on the screen; leaves a one-cell frame for labels.
BOARD_X = 1
BOARD_Y = 1


class TerminalSession:
    """Cursor-driven terminal front end for a single game.

    Keys: ``W``/``A``/``S``/``D`` move the cursor, space picks the origin and
    then the destination, ``.`` drops the selection, ``Q`` quits.
    """

    def __init__(self, game: Optional[Game] = None) -> None:
        self.game: Game = game if game is not None else Game.new()
        self.cursor: Square = (0, 0)
        self.selected: Optional[Square] = None
        self.quit = False

    # ---- Input ----
    def handle_key(self, key: str) -> None:
        file, rank = self.cursor
        k = key.upper()
        if k == "W" and rank < 7:
            self.cursor = (file, rank + 1)
        elif k == "S" and rank > 0:
            self.cursor = (file, rank - 1)
        elif k == "A" and file > 0:
            self.cursor = (file - 1, rank)
        elif k == "D" and file < 7:
            self.cursor = (file + 1, rank)
        elif k == " ":
            self._select()
        elif k == ".":
            self.selected = None
        elif k == "Q":
            self.quit = True

    def _select(self) -> None:
        if self.selected is None:
            self.selected = self.cursor
            return
        if not self.game.try_make_move(self.selected, self.cursor):
            logger.debug("move %s -> %s rejected", self.selected, self.cursor)
        self.selected = None

    # ---- Output ----
    def draw(self) -> Screen:
        screen = Screen(10, 10)
        screen.clear(bg=BACKDROP, glyph=" ")

        for rank in range(8):
            for file in range(8):
                x, y = _to_screen((file, rank))
                bg = LIGHT if (file + rank) % 2 == 1 else DARK
                screen.set_cell(x, y, bg=bg)
                piece = self.game.get_piece((file, rank))
                if piece is not None:
                    fg = WHITE_PIECE if piece.side is Side.WHITE else BLACK_PIECE
                    screen.set_cell(x, y, fg=fg, glyph=piece.symbol)

        for i in range(8):
            screen.set_cell(BOARD_X + i, BOARD_Y - 1, fg=LABEL, glyph=FILE_CHARS[i])
            screen.set_cell(BOARD_X + i, BOARD_Y + 8, fg=LABEL, glyph=FILE_CHARS[i])
            screen.set_cell(BOARD_X - 1, BOARD_Y + i, fg=LABEL, glyph=RANK_CHARS[7 - i])
            screen.set_cell(BOARD_X + 8, BOARD_Y + i, fg=LABEL, glyph=RANK_CHARS[7 - i])

        if self.selected is not None:
            screen.set_cell(*_to_screen(self.selected), bg=SELECTED)
            for sq in self.targets():
                screen.set_cell(*_to_screen(sq), bg=TARGET)

        screen.set_cell(*_to_screen(self.cursor), bg=CURSOR)

        if self.game.player_to_move() is Side.WHITE:
            screen.set_cell(0, 0, bg=Rgb(255, 255, 255), fg=Rgb(16, 16, 16), glyph="W")
        else:
            screen.set_cell(0, 0, bg=Rgb(16, 16, 16), fg=Rgb(196, 196, 196), glyph="B")
        return screen

    def targets(self) -> Set[Square]:
        if self.selected is None:
            return set()
        return self.game.get_legal_moves(self.selected)

    def banner(self) -> Optional[str]:
        status = self.game.status()
        if status is GameStatus.CHECKMATE:
            return "Checkmate!"
        if status is GameStatus.STALEMATE:
            return "Stalemate..."
        return None

    # ---- Loop ----
    def run(self, lines: Iterable[str], write: Writer, color: bool = True) -> Optional[str]:
        """Redraw, then consume one input line per turn until the game ends.

        Returns:
            Optional[str]: The final banner, or None if input ran out or the
                user quit first.
        """
        it = iter(lines)
        while True:
            write((CLEAR if color else "") + self.draw().render(color=color))
            banner = self.banner()
            if banner is not None:
                write(banner)
                logger.info("game over: %s", banner)
                return banner
            line = next(it, None)
            if line is None:
                return None
            for key in line.rstrip("\n"):
                self.handle_key(key)
                if self.quit:
                    return None


def _to_screen(sq: Square) -> tuple[int, int]:
    file, rank = sq
    return BOARD_X + file, BOARD_Y + (7 - rank)


def _default_writer(text: str) -> None:
    sys.stdout.write(text + "\n")
    sys.stdout.flush()


def run_terminal(game: Optional[Game] = None, color: bool = True) -> Optional[str]:
    return TerminalSession(game).run(sys.stdin, _default_writer, color=color)
