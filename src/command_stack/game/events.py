from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class CommandStart:
    id: int
    command: str


@dataclass(frozen=True)
class CommandEnd:
    id: int
    exit_code: int = 0


CommandEvent = Union[CommandStart, CommandEnd]
