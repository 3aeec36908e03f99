from src.api.core import Board, Mark
from src.api.opponent import select_move

X, O = Mark.X, Mark.O


def test_blocks_opponent_row():
    board = Board.from_marks("XX       ")
    assert select_move(board, O, X) == 2


def test_win_takes_priority_over_block():
    board = Board.from_marks("OO XX    ")
    assert select_move(board, O, X) == 2


def test_win_with_only_own_threat():
    board = Board.from_marks("OO       ")
    assert select_move(board, O, X) == 2


def test_lowest_winning_cell_first():
    # O can finish row 1 at 5 or the diagonal at 8; 5 comes first.
    board = Board.from_marks("OX OO XX ")
    assert select_move(board, O, X) == 5


def test_takes_center_when_free(first_choice):
    board = Board.from_marks("X        ")
    assert select_move(board, O, X, rng=first_choice) == 4
    assert first_choice.calls == []


def test_corner_chosen_among_free_corners(make_random):
    rng = make_random([1])
    board = Board.from_marks("X   O    ")
    assert select_move(board, O, X, rng=rng) == 6
    assert rng.calls == [[2, 6, 8]]


def test_full_board_returns_none():
    board = Board.from_marks("XOXXOOOXX")
    assert select_move(board, O, X) is None


def test_side_when_center_and_corners_taken(make_random):
    # X O X / . X . / O X O, O to move: no win, no block, only sides 3 and 5 free.
    rng = make_random([1])
    board = Board.from_marks(["X", "O", "X", None, "X", None, "O", "X", "O"])
    assert select_move(board, O, X, rng=rng) == 5
    assert rng.calls == [[3, 5]]
