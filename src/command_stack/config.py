from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional


BOARD_W = 10
BOARD_H = 20
CHUNK_SIZE = 8
FILLER = "░"

VARIETY_THRESH = 100
BOMB_CAP = 3

SOCKET_PATH = "/tmp/command-stack.sock"
GRAVITY_MS = 450
POLL_MS = 50


def default_socket_path() -> str:
    return os.environ.get("STACK_SOCKET", SOCKET_PATH)


@dataclass
class GameConfig:
    width: int = BOARD_W
    height: int = BOARD_H
    random_seed: Optional[int] = None
    spawn_x: int = 3
    spawn_y: int = 0


@dataclass
class AppConfig:
    socket_path: str = field(default_factory=default_socket_path)
    gravity_ms: int = GRAVITY_MS
    poll_ms: int = POLL_MS
    cell_size: int = 22
