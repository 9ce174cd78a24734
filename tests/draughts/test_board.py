"""Unit tests for /src/draughts/board.py and /src/draughts/square.py"""

import pytest

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Player, Rank
from src.draughts.board import PIECES_PER_PLAYER, Board
from src.draughts.pieces import Piece
from src.draughts.square import BOARD_SIZE, Square, dark_squares
from tests.helpers import WK, B, W, board_with, move


# -- SQUARES ---
def test_dark_squares() -> None:
    squares = dark_squares()
    assert len(squares) == BOARD_SIZE * BOARD_SIZE // 2
    assert all(square.is_dark() for square in squares)
    assert Square(0, 1) in squares
    assert Square(0, 0) not in squares


@pytest.mark.parametrize(
    "row, col, expected",
    [(0, 0, True), (7, 7, True), (-1, 3, False), (3, 8, False), (8, 0, False)],
)
def test_square_within_bounds(row: int, col: int, expected: bool) -> None:
    assert Square(row, col).is_within_bounds() is expected


def test_square_shifted() -> None:
    assert Square(3, 4).shifted((-1, 1)) == Square(2, 5)
    assert Square(3, 4).shifted((1, -1), steps=3) == Square(6, 1)


# -- STARTING POSITION ---
def test_starting_position() -> None:
    board = Board.starting_position()
    assert board.count_pieces(Player.WHITE) == PIECES_PER_PLAYER
    assert board.count_pieces(Player.BLACK) == PIECES_PER_PLAYER
    assert all(square.is_dark() for square in board.position)
    assert {sq.row for sq in board.locate_player(Player.WHITE)} == {0, 1, 2}
    assert {sq.row for sq in board.locate_player(Player.BLACK)} == {5, 6, 7}
    assert all(not piece.is_king for piece in board.position.values())


def test_starting_position_is_always_the_same() -> None:
    assert Board.starting_position() == Board.starting_position()


# -- GRID (WIRE FORMAT) ---
def test_grid_encoding() -> None:
    board = board_with({(0, 1): W, (7, 6): Piece(Player.BLACK, Rank.KING)})
    grid = board.to_grid()
    assert len(grid) == BOARD_SIZE and all(len(row) == BOARD_SIZE for row in grid)
    assert grid[0][1] == {"player": "white", "type": "pawn"}
    assert grid[7][6] == {"player": "black", "type": "king"}
    assert grid[0][0] is None
    assert Board.from_grid(grid) == board


def test_grid_must_be_eight_by_eight() -> None:
    with pytest.raises(InvalidRequestError):
        Board.from_grid([[None] * BOARD_SIZE] * (BOARD_SIZE - 1))


def test_pieces_only_on_dark_squares() -> None:
    grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]
    grid[0][0] = {"player": "white", "type": "pawn"}
    with pytest.raises(InvalidRequestError):
        Board.from_grid(grid)


# -- MOVE EXECUTOR ---
def test_apply_move_moves_the_piece() -> None:
    board = Board.starting_position()
    after = board.apply_move(move((2, 1), (3, 2)))
    assert after.piece(Square(3, 2)) == W
    assert after.is_empty(Square(2, 1))
    assert after.total_pieces() == board.total_pieces()


def test_apply_move_leaves_original_untouched() -> None:
    board = Board.starting_position()
    before = dict(board.position)
    board.apply_move(move((2, 1), (3, 2)))
    assert board.position == before


def test_apply_move_removes_every_captured_piece() -> None:
    board = board_with({(2, 1): W, (3, 2): B, (5, 4): B, (7, 0): B})
    after = board.apply_move(move((2, 1), (6, 5), ((3, 2), (5, 4))))
    assert after.total_pieces() == board.total_pieces() - 2
    assert after.is_empty(Square(3, 2)) and after.is_empty(Square(5, 4))
    assert after.piece(Square(6, 5)) == W


def test_apply_move_promotes() -> None:
    board = board_with({(6, 1): W})
    after = board.apply_move(move((6, 1), (7, 2), promotion=True))
    assert after.piece(Square(7, 2)) == WK


def test_apply_move_from_empty_square_changes_nothing() -> None:
    board = board_with({(6, 1): W})
    assert board.apply_move(move((2, 1), (3, 2))) == board
