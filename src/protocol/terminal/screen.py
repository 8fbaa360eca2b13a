from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Rgb:
    r: int
    g: int
    b: int

    def bg(self) -> str:
        return f"\x1b[48;2;{self.r};{self.g};{self.b}m"

    def fg(self) -> str:
        return f"\x1b[38;2;{self.r};{self.g};{self.b}m"


RESET = "\x1b[0m"
CLEAR = "\x1b[H\x1b[2J"


class Screen:
    """Grid of cells, each with a background, a foreground and one glyph.

    Cells are addressed ``(x, y)`` with ``y = 0`` on the top line. Writes
    outside the grid are ignored.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("screen dimensions must be positive")
        self.width = width
        self.height = height
        self._bg: List[List[Rgb]] = [[Rgb(0, 0, 0)] * width for _ in range(height)]
        self._fg: List[List[Rgb]] = [[Rgb(255, 255, 255)] * width for _ in range(height)]
        self._glyphs: List[List[str]] = [[" "] * width for _ in range(height)]

    def clear(
        self, bg: Optional[Rgb] = None, fg: Optional[Rgb] = None, glyph: Optional[str] = None
    ) -> None:
        for y in range(self.height):
            for x in range(self.width):
                self.set_cell(x, y, bg, fg, glyph)

    def set_cell(
        self,
        x: int,
        y: int,
        bg: Optional[Rgb] = None,
        fg: Optional[Rgb] = None,
        glyph: Optional[str] = None,
    ) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        if bg is not None:
            self._bg[y][x] = bg
        if fg is not None:
            self._fg[y][x] = fg
        if glyph is not None:
            self._glyphs[y][x] = glyph

    def glyph_at(self, x: int, y: int) -> str:
        return self._glyphs[y][x]

    def render(self, color: bool = True, double_width: bool = True) -> str:
        """Return the screen as text, one line per row.

        Args:
            color (bool): Emit 24-bit ANSI colour escapes.
            double_width (bool): Pad each glyph with a space so cells look square.
        """
        lines: List[str] = []
        for y in range(self.height):
            parts: List[str] = []
            for x in range(self.width):
                cell = self._glyphs[y][x] + (" " if double_width else "")
                if color:
                    cell = self._bg[y][x].bg() + self._fg[y][x].fg() + cell
                parts.append(cell)
            if color:
                parts.append(RESET)
            lines.append("".join(parts))
        return "\n".join(lines)
