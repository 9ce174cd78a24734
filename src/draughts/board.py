"""The Game board: placement of the pieces and the (pure) execution of a move"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Self

from src.core.exceptions import InvalidRequestError
from src.core.models import BoardGrid
from src.core.shared_types import Player
from src.draughts.pieces import Piece
from src.draughts.square import BOARD_SIZE, Square, dark_squares

if TYPE_CHECKING:
    from src.draughts.moves import Move

# Each side starts with its first three rows of dark squares filled with pawns
STARTING_ROWS: dict[Player, range] = {
    Player.WHITE: range(0, 3),
    Player.BLACK: range(BOARD_SIZE - 3, BOARD_SIZE),
}
PIECES_PER_PLAYER = 12


@dataclass(frozen=True)
class Board:
    """
    Immutable snapshot of the board.

    Only occupied squares are stored. Every transformation returns a new Board, so
    the history of a game and the branches of a search tree never share state.
    """

    position: dict[Square, Piece] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for square in self.position:
            if not (square.is_within_bounds() and square.is_dark()):
                raise InvalidRequestError(
                    f"Pieces can only be placed on dark squares of the board, got {square}."
                )

    @classmethod
    def starting_position(cls) -> Self:
        position: dict[Square, Piece] = {}
        for square in dark_squares():
            for player, rows in STARTING_ROWS.items():
                if square.row in rows:
                    position[square] = Piece(player)
        return cls(position)

    @classmethod
    def from_grid(cls, grid: BoardGrid) -> Self:
        """Read the wire format: 8 rows of 8 cells, each cell either null or {"player", "type"}"""
        if len(grid) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in grid):
            raise InvalidRequestError(
                f"Board must be {BOARD_SIZE}x{BOARD_SIZE} cells."
            )
        position: dict[Square, Piece] = {}
        for row_idx, row in enumerate(grid):
            for col_idx, cell in enumerate(row):
                if cell is not None:
                    position[Square(row_idx, col_idx)] = Piece.from_dict(cell)
        return cls(position)

    def to_grid(self) -> BoardGrid:
        return [
            [
                self.position[Square(row, col)].to_dict()
                if Square(row, col) in self.position
                else None
                for col in range(BOARD_SIZE)
            ]
            for row in range(BOARD_SIZE)
        ]

    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_empty(self, square: Square) -> bool:
        return square not in self.position

    def locate_player(self, player: Player) -> list[Square]:
        """Squares holding the player's pieces, in scan order (row by row)"""
        return sorted(
            square for square, piece in self.position.items() if piece.player == player
        )

    def count_pieces(self, player: Player) -> int:
        return sum(1 for piece in self.position.values() if piece.player == player)

    def total_pieces(self) -> int:
        return len(self.position)

    def with_pieces(
        self,
        remove: tuple[Square, ...] = (),
        place: Optional[dict[Square, Piece]] = None,
    ) -> Board:
        """New board with some squares cleared and some pieces (re)placed"""
        position = dict(self.position)
        for square in remove:
            position.pop(square, None)
        position.update(place or {})
        return Board(position)

    def apply_move(self, move: Move) -> Board:
        """
        Move Executor: the board after the move. The current board is left untouched.

        Clears the starting square and every captured square, then places the piece
        (as a king if the move promotes) on the target square. Only moves produced by
        the move generator should be passed in: a move from an empty square changes nothing.
        """
        moving_piece = self.piece(move.from_square)
        if moving_piece is None:
            return Board(dict(self.position))

        final_piece = moving_piece.promoted() if move.promotion else moving_piece
        return self.with_pieces(
            remove=(move.from_square, *move.captures),
            place={move.to_square: final_piece},
        )
