"""Shorthands to set up positions in tests"""

from src.core.shared_types import Player, Rank
from src.draughts.board import Board
from src.draughts.moves import Move
from src.draughts.pieces import Piece
from src.draughts.square import Square

W = Piece(Player.WHITE)
B = Piece(Player.BLACK)
WK = Piece(Player.WHITE, Rank.KING)
BK = Piece(Player.BLACK, Rank.KING)


def board_with(pieces: dict[tuple[int, int], Piece]) -> Board:
    """Board from {(row, col): piece}"""
    return Board({Square(row, col): piece for (row, col), piece in pieces.items()})


def move(
    from_rc: tuple[int, int],
    to_rc: tuple[int, int],
    captures: tuple[tuple[int, int], ...] = (),
    promotion: bool = False,
) -> Move:
    return Move(
        Square(*from_rc),
        Square(*to_rc),
        tuple(Square(*rc) for rc in captures),
        promotion,
    )
