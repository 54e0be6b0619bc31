"""Game module for command-stack.

Exports the core engine and supporting classes:
- Board: glyph-pair grid
- Piece / Shape: tetromino geometry carrying an 8-glyph payload
- CommandStart / CommandEnd: command lifecycle events
- ScoringRules: line-clear table and variety economy constants
- Game: the falling-block state machine
"""

from .board import Board, Cell, EMPTY
from .pieces import Piece, Shape, resolve
from .events import CommandEnd, CommandEvent, CommandStart
from .rules import ScoringRules
from .core import Action, CommandRun, Game, QueuedPiece

__all__ = [
    "Board",
    "Cell",
    "EMPTY",
    "Piece",
    "Shape",
    "resolve",
    "CommandStart",
    "CommandEnd",
    "CommandEvent",
    "ScoringRules",
    "Game",
    "Action",
    "CommandRun",
    "QueuedPiece",
]
