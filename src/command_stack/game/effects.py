"""Board and economy effects triggered by locking bombs and by command outcomes.

These are plain functions over a :class:`~command_stack.game.core.Game`; the
game calls them from ``lock_piece``, ``handle_command_event`` and
``process_effects``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Set, Tuple

import numpy as np

from command_stack.config import FILLER

if TYPE_CHECKING:  # pragma: no cover
    from .core import Game


logger = logging.getLogger(__name__)

GARBAGE_CELL = ("#", FILLER)
INFECTED_CELL = ("?", FILLER)
INFECTION_COUNT = 5


def apply_bomb_clear(game: "Game") -> int:
    """Empty the 3x3 neighbourhood of every cell the current piece occupies."""
    board = game.board
    to_clear: Set[Tuple[int, int]] = set()
    for x, y in game.current.positions():
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                nx, ny = x + dx, y + dy
                if board.is_inside(nx, ny):
                    to_clear.add((nx, ny))
    for x, y in to_clear:
        board.set(x, y, None)
    logger.debug("Bomb cleared %d cells", len(to_clear))
    return len(to_clear)


def apply_garbage_row(game: "Game") -> None:
    board = game.board
    overflow = bool(board.filled_mask()[0].any())
    hole = game.rng.randrange(board.width)
    bottom = np.empty((board.width, 2), dtype="<U1")
    bottom[:] = GARBAGE_CELL
    bottom[hole] = ("", "")
    board.shift_up(bottom)
    game.shift_overlays_up()
    if overflow:
        logger.debug("Garbage pushed the stack through the ceiling")
        game.game_over = True
        return
    if game.active_piece and not game.can_place(game.current):
        # The stack rose into the falling piece: lift it with the stack
        lifted = game.current.shifted(0, -1)
        if game.can_place(lifted):
            game.current = lifted
        else:
            logger.debug("Garbage buried the falling piece")
            game.active_piece = False
            game.game_over = True


def apply_infection(game: "Game") -> None:
    filled = game.board.filled_cells()
    count = min(len(filled), INFECTION_COUNT)
    for x, y in game.rng.sample(filled, count):
        game.board.set(x, y, INFECTED_CELL)


def apply_variety(game: "Game", identity: str, exit_code: int) -> int:
    """Update the variety meter for one finished command and return the points earned.

    A repeat of the previous identity costs ``repeat_penalty`` and resets the
    streak; anything else costs ``decay`` and extends the streak. Failed
    commands earn half. Each full threshold on the meter becomes a bomb, up to
    the cap; crossings past the cap are still deducted from the meter.
    """
    rules = game.rules
    if game.last_cmd_identity == identity:
        game.variety_meter = max(game.variety_meter - rules.repeat_penalty, 0)
        game.variety_streak = 0
        points = 0
    else:
        game.variety_meter = max(game.variety_meter - rules.decay, 0)
        game.variety_streak += 1
        points = rules.variety_points(game.variety_streak)

    if exit_code != 0:
        points //= 2

    game.variety_meter += points
    while game.variety_meter >= rules.variety_threshold:
        game.variety_meter -= rules.variety_threshold
        game.bombs = min(game.bombs + 1, rules.bomb_cap)
        logger.debug("Variety meter earned a bomb (now %d)", game.bombs)
    return points


def perform_pending_clear(game: "Game") -> int:
    cleared = game.board.remove_rows(game.pending_clear)
    game.pending_clear = []
    if cleared:
        game.lines_cleared += cleared
        game.score += game.rules.score_for_lines(cleared)
    return cleared
