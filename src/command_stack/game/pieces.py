from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple

from command_stack.config import FILLER


class Shape(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Offset = Tuple[int, int]

# (dx, dy) offsets inside a 4x4 frame anchored at the piece's (x, y), per rotation.
SHAPE_OFFSETS: Dict[Shape, Tuple[Tuple[Offset, ...], ...]] = {
    Shape.I: (
        ((0, 1), (1, 1), (2, 1), (3, 1)),
        ((2, 0), (2, 1), (2, 2), (2, 3)),
        ((0, 2), (1, 2), (2, 2), (3, 2)),
        ((1, 0), (1, 1), (1, 2), (1, 3)),
    ),
    Shape.O: (
        ((1, 0), (2, 0), (1, 1), (2, 1)),
        ((1, 0), (2, 0), (1, 1), (2, 1)),
        ((1, 0), (2, 0), (1, 1), (2, 1)),
        ((1, 0), (2, 0), (1, 1), (2, 1)),
    ),
    Shape.T: (
        ((1, 0), (0, 1), (1, 1), (2, 1)),
        ((1, 0), (1, 1), (2, 1), (1, 2)),
        ((0, 1), (1, 1), (2, 1), (1, 2)),
        ((1, 0), (0, 1), (1, 1), (1, 2)),
    ),
    Shape.S: (
        ((1, 0), (2, 0), (0, 1), (1, 1)),
        ((1, 0), (1, 1), (2, 1), (2, 2)),
        ((1, 1), (2, 1), (0, 2), (1, 2)),
        ((0, 0), (0, 1), (1, 1), (1, 2)),
    ),
    Shape.Z: (
        ((0, 0), (1, 0), (1, 1), (2, 1)),
        ((2, 0), (1, 1), (2, 1), (1, 2)),
        ((0, 1), (1, 1), (1, 2), (2, 2)),
        ((1, 0), (0, 1), (1, 1), (0, 2)),
    ),
    Shape.J: (
        ((0, 0), (0, 1), (1, 1), (2, 1)),
        ((1, 0), (2, 0), (1, 1), (1, 2)),
        ((0, 1), (1, 1), (2, 1), (2, 2)),
        ((1, 0), (1, 1), (0, 2), (1, 2)),
    ),
    Shape.L: (
        ((2, 0), (0, 1), (1, 1), (2, 1)),
        ((1, 0), (1, 1), (1, 2), (2, 2)),
        ((0, 1), (1, 1), (2, 1), (0, 2)),
        ((0, 0), (1, 0), (1, 1), (1, 2)),
    ),
}


def shape_offsets(shape: Shape, rotation: int) -> Tuple[Offset, ...]:
    return SHAPE_OFFSETS[shape][rotation % 4]


def resolve(payload: Sequence[str], index: int, fallback: str) -> str:
    """Glyph at ``index``, else the payload's last glyph, else ``fallback``."""
    if 0 <= index < len(payload):
        return payload[index]
    if payload:
        return payload[-1]
    return fallback


def random_shape(rng: Optional[random.Random] = None) -> Shape:
    return (rng or random).choice(list(Shape))


@dataclass(frozen=True)
class Piece:
    shape: Shape
    payload: Tuple[str, ...] = ()
    rotation: int = 0  # 0..3
    x: int = 3
    y: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotation", self.rotation % 4)
        object.__setattr__(self, "payload", tuple(self.payload))

    def offsets(self) -> Tuple[Offset, ...]:
        return shape_offsets(self.shape, self.rotation)

    def positions(self) -> List[Tuple[int, int]]:
        return [(self.x + dx, self.y + dy) for dx, dy in self.offsets()]

    def cells(self) -> List[Tuple[int, int, str]]:
        return [
            (self.x + dx, self.y + dy, resolve(self.payload, i, "#"))
            for i, (dx, dy) in enumerate(self.offsets())
        ]

    def cells_with_pairs(self) -> List[Tuple[int, int, Tuple[str, str]]]:
        """Occupied cells with the two payload glyphs each cell displays."""
        return [
            (
                self.x + dx,
                self.y + dy,
                (resolve(self.payload, 2 * i, FILLER), resolve(self.payload, 2 * i + 1, FILLER)),
            )
            for i, (dx, dy) in enumerate(self.offsets())
        ]

    def rotated(self) -> "Piece":
        return replace(self, rotation=(self.rotation + 1) % 4)

    def shifted(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)
