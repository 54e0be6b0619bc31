"""command-stack: a falling-block puzzle fed by shell command lifecycles.

Every command run in an instrumented shell becomes a stream of pieces whose
cells spell out the command text. Failing commands push garbage rows, and a
varied command history earns bombs.
"""

from .config import GameConfig
from .game import CommandEnd, CommandStart, Game

__all__ = ["GameConfig", "Game", "CommandStart", "CommandEnd"]
