from __future__ import annotations

from typing import List, Tuple

import pygame

from command_stack.game import Game
from .playfield import render_playfield, sidebar_lines


def _color_for_glyph(ch: str) -> Tuple[int, int, int]:
    palette = {
        "█": (250, 250, 250),  # clear flash
        "▓": (240, 160, 0),    # lock flash / bomb
        "·": (90, 90, 110),    # ghost
        "?": (220, 60, 200),   # infected
        "#": (200, 60, 60),    # garbage
        "░": (70, 70, 90),     # filler
    }
    return palette.get(ch, (0, 240, 240))


class Renderer:
    def __init__(self, cell_size: int = 22, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.font = pygame.font.SysFont("monospace", cell_size, bold=True)
        self.char_w, self.char_h = self.font.size("M")

    def window_size(self, game: Game) -> Tuple[int, int]:
        cols = game.board.width * 2 + 2 + 16
        rows = max(game.board.height + 2, len(sidebar_lines(game)))
        return cols * self.char_w + self.margin * 3, rows * self.char_h + self.margin * 2

    def _blit_lines(self, screen: pygame.Surface, lines: List[str], x0: int, y0: int, colored: bool) -> None:
        for row, line in enumerate(lines):
            y = y0 + row * self.char_h
            for col, ch in enumerate(line):
                if ch == " ":
                    continue
                color = _color_for_glyph(ch) if colored else (230, 230, 230)
                surf = self.font.render(ch, True, color)
                screen.blit(surf, (x0 + col * self.char_w, y))

    def draw(self, screen: pygame.Surface, game: Game) -> None:
        screen.fill((10, 10, 14))
        playfield = render_playfield(game)
        self._blit_lines(screen, playfield, self.margin, self.margin, colored=True)
        side_x = self.margin * 2 + len(playfield[0]) * self.char_w
        self._blit_lines(screen, sidebar_lines(game), side_x, self.margin, colored=False)
        pygame.display.flip()
