import random

from command_stack.config import FILLER
from command_stack.game import Piece, Shape, resolve
from command_stack.game.pieces import SHAPE_OFFSETS, random_shape, shape_offsets


def test_resolve_fallback_chain():
    assert resolve(("a", "b"), 1, "#") == "b"
    assert resolve(("a", "b"), 5, "#") == "b"
    assert resolve((), 0, "#") == "#"
    assert resolve(("a",), -1, "#") == "a"


def test_offset_table_is_complete():
    assert set(SHAPE_OFFSETS) == set(Shape)
    for shape, rotations in SHAPE_OFFSETS.items():
        assert len(rotations) == 4
        for offsets in rotations:
            assert len(offsets) == 4
            assert len(set(offsets)) == 4
            assert all(0 <= dx < 4 and 0 <= dy < 4 for dx, dy in offsets)


def test_shape_offsets_rotation_is_mod_4():
    assert shape_offsets(Shape.T, 5) == shape_offsets(Shape.T, 1)


def test_cells_follow_anchor_and_payload():
    piece = Piece(Shape.O, payload=tuple("abcdefgh"), x=2, y=5)
    assert piece.cells() == [(3, 5, "a"), (4, 5, "b"), (3, 6, "c"), (4, 6, "d")]
    assert piece.cells_with_pairs() == [
        (3, 5, ("a", "b")),
        (4, 5, ("c", "d")),
        (3, 6, ("e", "f")),
        (4, 6, ("g", "h")),
    ]


def test_short_or_empty_payload_never_fails():
    empty = Piece(Shape.L)
    assert [g for _, _, g in empty.cells()] == ["#"] * 4
    assert [pair for _, _, pair in empty.cells_with_pairs()] == [(FILLER, FILLER)] * 4

    short = Piece(Shape.S, payload=("x", "y", "z"))
    assert [g for _, _, g in short.cells()] == ["x", "y", "z", "z"]
    pairs = [pair for _, _, pair in short.cells_with_pairs()]
    assert pairs[0] == ("x", "y")
    assert pairs[1:] == [("z", "z")] * 3


def test_rotated_and_shifted_are_pure():
    piece = Piece(Shape.T, payload=tuple("abcdefgh"), rotation=3)
    turned = piece.rotated()
    moved = piece.shifted(2, -1)
    assert turned.rotation == 0
    assert piece.rotation == 3
    assert (moved.x, moved.y) == (5, -1)
    assert (piece.x, piece.y) == (3, 0)
    assert Piece(Shape.I, rotation=6).rotation == 2


def test_random_shape_uses_given_rng():
    a = [random_shape(random.Random(9)) for _ in range(3)]
    b = [random_shape(random.Random(9)) for _ in range(3)]
    assert a == b
    assert all(isinstance(s, Shape) for s in a)
