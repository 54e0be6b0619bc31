from __future__ import annotations

import time
from typing import List, Optional

from command_stack.game import Game


CELL_W = 2  # each board cell is drawn two characters wide
LOCK_FLASH_GLYPH = "▓"
CLEAR_FLASH_GLYPH = "█"
GHOST_GLYPH = "·"

CONTROLS = ["←/→ move", "↑ rotate", "↓ soft", "space slam", "q quit"]


def render_playfield(game: Game) -> List[str]:
    """Character grid of the well: border, stack, flashes, ghost and falling piece."""
    board = game.board
    play_w = board.width * CELL_W + 2
    play_h = board.height + 2
    grid = [[" "] * play_w for _ in range(play_h)]

    grid[0] = ["┌"] + ["─"] * (play_w - 2) + ["┐"]
    for row in grid[1:-1]:
        row[0] = row[-1] = "│"
    grid[-1] = ["└"] + ["═"] * (play_w - 2) + ["┘"]

    def plot(x: int, y: int, left: str, right: str) -> None:
        if board.is_inside(x, y):
            gx = 1 + x * CELL_W
            grid[1 + y][gx] = left
            grid[1 + y][gx + 1] = right

    flashing = set(game.lock_flash_cells) if game.lock_flash_frames > 0 else set()
    for x, y in board.filled_cells():
        if (x, y) in flashing:
            plot(x, y, LOCK_FLASH_GLYPH, LOCK_FLASH_GLYPH)
        else:
            left, right = board.get(x, y)
            plot(x, y, left, right)

    if game.clear_flash_frames > 0:
        for row in game.pending_clear:
            for x in range(board.width):
                plot(x, row, CLEAR_FLASH_GLYPH, CLEAR_FLASH_GLYPH)

    if game.active_piece:
        for x, y, _ in game.ghost_piece().cells():
            plot(x, y, GHOST_GLYPH, GHOST_GLYPH)
        for x, y, (left, right) in game.current.cells_with_pairs():
            plot(x, y, left, right)

    lines = ["".join(row) for row in grid]
    if game.game_over:
        mid = play_h // 2
        for offset, text in ((-1, "GAME OVER"), (0, "Press q")):
            inner = text.center(play_w - 2)
            lines[mid + offset] = "│" + inner + "│"
    return lines


def status_text(game: Game, now_ms: Optional[int] = None) -> str:
    if game.game_over:
        return "OVER"
    if not game.is_running():
        return "IDLE"
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    # Blink while commands are feeding pieces
    return "ACTIVE" if (now_ms // 300) % 2 == 0 else ""


def sidebar_lines(game: Game, now_ms: Optional[int] = None) -> List[str]:
    run = "-" if game.active_run is None else f"#{game.active_run}"
    if game.current_is_bomb and game.active_piece:
        run = "BOMB"
    lines = [
        "SCORE", str(game.score), "",
        "LINES", str(game.lines_cleared), "",
        "BOMBS", "●" * game.bombs or "-", "",
        "VARIETY", f"{game.variety_meter}/{game.rules.variety_threshold}", "",
        "RUN", run, "",
        "STATUS", status_text(game, now_ms), "",
    ]
    lines.extend(CONTROLS)
    return lines
