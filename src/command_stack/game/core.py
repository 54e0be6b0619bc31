from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Deque, Dict, List, Optional, Tuple

import numpy as np

from command_stack.commands import chunk_to_payload, command_identity, command_to_chunks
from command_stack.config import CHUNK_SIZE, FILLER, GameConfig
from . import effects
from .board import Board
from .events import CommandEnd, CommandEvent, CommandStart
from .pieces import Piece, Shape, random_shape
from .rules import ScoringRules


logger = logging.getLogger(__name__)

LOCK_FLASH_FRAMES = 1
CLEAR_FLASH_FRAMES = 2
BOMB_GLYPH = "▓"
CYCLE_MASK = (1 << 64) - 1


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5


@dataclass
class CommandRun:
    id: int
    chunks: List[str]
    identity: str
    cycle: int = 0
    active: bool = True
    outstanding: int = 0  # pieces of this run still waiting in the queue

    def next_cycle_pieces(self, rng: random.Random, spawn_x: int = 3, spawn_y: int = 0) -> Tuple[int, List[Piece]]:
        """Advance the cycle and build one freshly-shaped piece per chunk."""
        self.cycle = (self.cycle + 1) & CYCLE_MASK
        pieces = [
            Piece(shape=random_shape(rng), payload=chunk_to_payload(chunk), x=spawn_x, y=spawn_y)
            for chunk in self.chunks
        ]
        return self.cycle, pieces


@dataclass
class QueuedPiece:
    piece: Piece
    # None marks a bomb; bombs belong to no run.
    run_id: Optional[int] = None
    cycle: int = 0

    @property
    def is_bomb(self) -> bool:
        return self.run_id is None


@dataclass
class _FlashState:
    cells: List[Tuple[int, int]] = field(default_factory=list)
    frames: int = 0


class Game:
    """Falling-block state machine driven by command start/end events.

    Pieces come from a queue fed by live command runs and, when no run has
    work pending, by the bomb economy. Line clears are deferred behind a short
    flash counted in frames by :meth:`process_effects`.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.board = Board(self.config.width, self.config.height)
        self.reset()

    def reset(self) -> None:
        self.board.reset()
        self.current = self._make_piece(Shape.I, (FILLER,) * CHUNK_SIZE)
        self.game_over = False
        self.score = 0
        self.lines_cleared = 0
        self.pending_clear: List[int] = []
        self.clear_flash_frames = 0
        self._lock_flash = _FlashState()
        self.piece_queue: Deque[QueuedPiece] = deque()
        self.active_piece = False
        self.active_run: Optional[int] = None
        self.runs: Dict[int, CommandRun] = {}
        self.bombs = 0
        self.current_is_bomb = False
        self.variety_meter = 0
        self.variety_streak = 0
        self.last_cmd_identity: Optional[str] = None

    def _make_piece(self, shape: Shape, payload) -> Piece:
        return Piece(shape=shape, payload=payload, x=self.config.spawn_x, y=self.config.spawn_y)

    # Read-only views for renderers

    @property
    def lock_flash_cells(self) -> List[Tuple[int, int]]:
        return list(self._lock_flash.cells)

    @property
    def lock_flash_frames(self) -> int:
        return self._lock_flash.frames

    @property
    def queued_pieces(self) -> Tuple[QueuedPiece, ...]:
        return tuple(self.piece_queue)

    def is_running(self) -> bool:
        return (
            self.active_piece
            or bool(self.piece_queue)
            or any(run.active for run in self.runs.values())
        )

    # Movement

    def can_place(self, piece: Piece) -> bool:
        for x, y in piece.positions():
            if not self.board.is_inside(x, y):
                return False
            if self.board.get(x, y) is not None:
                return False
        return True

    def move_current(self, dx: int, dy: int) -> bool:
        if self.game_over:
            return False
        moved = self.current.shifted(dx, dy)
        if not self.can_place(moved):
            return False
        self.current = moved
        return True

    def rotate_current(self) -> bool:
        if self.game_over:
            return False
        rotated = self.current.rotated()
        if not self.can_place(rotated):
            return False
        self.current = rotated
        return True

    def ghost_piece(self) -> Piece:
        ghost = self.current
        while self.can_place(ghost.shifted(0, 1)):
            ghost = ghost.shifted(0, 1)
        return ghost

    # Locking and spawning

    def lock_piece(self) -> None:
        cells: List[Tuple[int, int]] = []
        for x, y, pair in self.current.cells_with_pairs():
            if self.board.is_inside(x, y):
                self.board.set(x, y, pair)
                cells.append((x, y))
        self._lock_flash = _FlashState(cells=cells, frames=LOCK_FLASH_FRAMES)
        self.active_run = None
        self.active_piece = False

        full_rows = self.board.full_rows()
        if full_rows:
            self.pending_clear = full_rows
            self.clear_flash_frames = CLEAR_FLASH_FRAMES

        if self.current_is_bomb:
            effects.apply_bomb_clear(self)

    def tick_gravity(self) -> None:
        if self.game_over or not self.active_piece:
            return
        if not self.move_current(0, 1):
            self.lock_piece()
            self.spawn_next()

    def hard_drop(self) -> None:
        if self.game_over or not self.active_piece:
            return
        while self.move_current(0, 1):
            pass
        self.lock_piece()
        self.spawn_next()

    def spawn_next(self) -> None:
        if self.game_over:
            return
        self.ensure_queue()
        self.active_piece = False
        self.active_run = None
        self.current_is_bomb = False
        if not self.piece_queue:
            return

        queued = self.piece_queue.popleft()
        self._release(queued)
        if not self.can_place(queued.piece):
            logger.debug("Spawn blocked; game over with score %d", self.score)
            self.game_over = True
            return
        self.current = queued.piece
        self.active_piece = True
        self.active_run = queued.run_id
        self.current_is_bomb = queued.is_bomb

    def ensure_queue(self) -> None:
        if self.piece_queue:
            return
        for run in self.runs.values():
            if run.active:
                self._enqueue_cycle(run)
        if not self.piece_queue and self.bombs > 0:
            bomb = self._make_piece(Shape.O, (BOMB_GLYPH,) * CHUNK_SIZE)
            self.piece_queue.append(QueuedPiece(piece=bomb))
            self.bombs -= 1

    def _enqueue_cycle(self, run: CommandRun) -> None:
        cycle, pieces = run.next_cycle_pieces(self.rng, self.config.spawn_x, self.config.spawn_y)
        for piece in pieces:
            self.piece_queue.append(QueuedPiece(piece=piece, run_id=run.id, cycle=cycle))
        run.outstanding += len(pieces)

    def _release(self, queued: QueuedPiece) -> None:
        """Account for a run's piece leaving the queue, evicting finished runs."""
        if queued.is_bomb:
            return
        run = self.runs.get(queued.run_id)
        if run is None:
            return
        run.outstanding -= 1
        if not run.active and run.outstanding <= 0:
            del self.runs[run.id]

    # Command lifecycle

    def handle_command_event(self, event: CommandEvent) -> None:
        if self.game_over:
            return
        if isinstance(event, CommandStart):
            self._start_run(event)
        elif isinstance(event, CommandEnd):
            self._end_run(event)

    def _start_run(self, event: CommandStart) -> None:
        identity = command_identity(event.command)
        run = CommandRun(id=event.id, chunks=command_to_chunks(event.command), identity=identity)
        self.runs[event.id] = run
        self._enqueue_cycle(run)
        logger.debug("Run %d started (%s): %d pieces queued", run.id, identity, len(run.chunks))
        if self.last_cmd_identity is None:
            self.last_cmd_identity = identity
        if not self.active_piece:
            self.spawn_next()

    def _end_run(self, event: CommandEnd) -> None:
        run = self.runs.get(event.id)
        if run is not None:
            run.active = False

        # Only the first cycle stays committed once a run has ended.
        kept: Deque[QueuedPiece] = deque()
        for queued in self.piece_queue:
            if queued.run_id == event.id and queued.cycle > 1:
                self._release(queued)
            else:
                kept.append(queued)
        self.piece_queue = kept

        if event.exit_code != 0:
            effects.apply_garbage_row(self)
            effects.apply_infection(self)
        if run is not None:
            effects.apply_variety(self, run.identity, event.exit_code)
            self.last_cmd_identity = run.identity
            if run.outstanding <= 0:
                self.runs.pop(run.id, None)
        logger.debug("Run %d ended with exit code %d", event.id, event.exit_code)

    def shift_overlays_up(self) -> None:
        """Move pending-clear rows and lock-flash cells up with a board shift."""
        self.pending_clear = [row - 1 for row in self.pending_clear if row > 0]
        self._lock_flash.cells = [(x, y - 1) for x, y in self._lock_flash.cells if y > 0]

    # Frame effects

    def process_effects(self) -> None:
        if self._lock_flash.frames > 0:
            self._lock_flash.frames -= 1
        if self.clear_flash_frames > 0:
            self.clear_flash_frames -= 1
            if self.clear_flash_frames == 0 and self.pending_clear:
                effects.perform_pending_clear(self)

    # Step API used by the environment

    def step(self, action: Action) -> None:
        if self.game_over or not self.active_piece:
            return
        if action == Action.LEFT:
            self.move_current(-1, 0)
        elif action == Action.RIGHT:
            self.move_current(1, 0)
        elif action == Action.ROTATE:
            self.rotate_current()
        elif action == Action.SOFT_DROP:
            self.move_current(0, 1)
        elif action == Action.HARD_DROP:
            self.hard_drop()

    def get_state(self) -> np.ndarray:
        # Occupancy with the falling piece overlaid as -1
        state = self.board.occupancy()
        if self.active_piece and not self.game_over:
            for x, y in self.current.positions():
                if self.board.is_inside(x, y):
                    state[y, x] = -1
        return state
