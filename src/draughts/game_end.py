"""Terminal positions. Draughts has no stalemate draw: a side that cannot move has lost."""

from dataclasses import dataclass
from typing import Optional

from src.core.shared_types import Player
from src.draughts.board import Board
from src.draughts.moves import has_legal_move


@dataclass(frozen=True)
class GameEnd:
    ended: bool
    winner: Optional[Player] = None


GAME_GOES_ON = GameEnd(ended=False)


def evaluate_game_end(board: Board, side_to_move: Player) -> GameEnd:
    """
    1. A side without pieces has lost.
    2. The side to move without a legal move (blocked pawns, no capture) has lost as well.
    """
    for player in (side_to_move, side_to_move.opponent):
        if board.count_pieces(player) == 0:
            return GameEnd(ended=True, winner=player.opponent)

    if not has_legal_move(board, side_to_move):
        return GameEnd(ended=True, winner=side_to_move.opponent)

    return GAME_GOES_ON
