from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import numpy as np


Coordinate = Tuple[int, int]
# A filled cell is a (left, right) glyph pair; an empty cell is None.
Cell = Optional[Tuple[str, str]]
EMPTY: Cell = None


class Board:
    """Fixed-size grid of two-glyph cells.

    Glyphs live in a ``(height, width, 2)`` unicode array; the empty string
    marks an empty cell. Index preconditions (``0 <= x < width``,
    ``0 <= y < height``) are the caller's responsibility.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.glyphs = np.full((self.height, self.width, 2), "", dtype="<U1")

    def reset(self) -> None:
        self.glyphs.fill("")

    def get(self, x: int, y: int) -> Cell:
        left, right = self.glyphs[y, x]
        if not left:
            return EMPTY
        return str(left), str(right)

    def set(self, x: int, y: int, cell: Cell) -> None:
        """Write a glyph pair, or empty the cell when ``cell`` is None.

        Each glyph is stored as a single code point: longer strings are
        truncated to their first character, and a left glyph of ``""`` or
        ``"\\x00"`` reads back as an empty cell.
        """
        if cell is None:
            self.glyphs[y, x] = ("", "")
        else:
            self.glyphs[y, x] = cell

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def filled_mask(self) -> np.ndarray:
        return self.glyphs[:, :, 0] != ""

    def full_rows(self) -> List[int]:
        return [int(y) for y in np.where(np.all(self.filled_mask(), axis=1))[0]]

    def filled_cells(self) -> List[Coordinate]:
        ys, xs = np.nonzero(self.filled_mask())
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def remove_rows(self, rows: Iterable[int]) -> int:
        """Delete ``rows`` and pad the top with empty rows; returns the count."""
        rows = sorted(set(rows))
        if not rows:
            return 0
        kept = np.delete(self.glyphs, rows, axis=0)
        padding = np.full((len(rows), self.width, 2), "", dtype="<U1")
        self.glyphs = np.concatenate((padding, kept), axis=0)
        return len(rows)

    def shift_up(self, bottom: np.ndarray) -> None:
        """Drop row 0, move every row up by one and append ``bottom``."""
        self.glyphs = np.concatenate((self.glyphs[1:], bottom[np.newaxis]), axis=0)

    def occupancy(self) -> np.ndarray:
        return self.filled_mask().astype(np.int8)
