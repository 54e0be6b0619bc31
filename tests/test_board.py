import numpy as np

from command_stack.game import Board


def test_new_board_is_empty():
    board = Board(4, 3)
    assert board.glyphs.shape == (3, 4, 2)
    assert all(board.get(x, y) is None for x in range(4) for y in range(3))


def test_set_and_get_pairs():
    board = Board(4, 3)
    board.set(1, 2, ("a", "b"))
    assert board.get(1, 2) == ("a", "b")
    assert board.filled_cells() == [(1, 2)]
    board.set(1, 2, None)
    assert board.get(1, 2) is None


def test_full_rows_and_remove_rows_keep_height():
    board = Board(3, 4)
    for x in range(3):
        board.set(x, 3, ("x", "x"))
    board.set(0, 2, ("k", "k"))
    assert board.full_rows() == [3]
    assert board.remove_rows([3]) == 1
    assert board.glyphs.shape == (4, 3, 2)
    assert board.get(0, 3) == ("k", "k")
    assert board.full_rows() == []


def test_shift_up_discards_top_row():
    board = Board(2, 3)
    board.set(0, 0, ("t", "t"))
    board.set(1, 2, ("b", "b"))
    bottom = np.array([["g", "g"], ["", ""]], dtype="<U1")
    board.shift_up(bottom)
    assert board.get(0, 0) is None
    assert board.get(1, 1) == ("b", "b")
    assert board.get(0, 2) == ("g", "g")
    assert board.get(1, 2) is None


def test_glyphs_hold_one_code_point():
    board = Board(2, 2)
    board.set(0, 0, ("ab", "cd"))
    assert board.get(0, 0) == ("a", "c")
    board.set(1, 1, ("\x00", "x"))
    assert board.get(1, 1) is None
