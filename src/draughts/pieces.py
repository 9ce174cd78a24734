"""Defines the draughts pieces"""

from dataclasses import dataclass, replace
from typing import Self

from src.core.shared_types import Player, Rank
from src.draughts.square import BOARD_SIZE, Square

# Material value used by the computer opponent. A king is worth roughly three pawns.
PIECE_VALUES: dict[Rank, int] = {
    Rank.PAWN: 100,
    Rank.KING: 300,
}

# White starts on rows 0-2 and moves down the board (increasing rows), black the other way.
FORWARD: dict[Player, int] = {
    Player.WHITE: 1,
    Player.BLACK: -1,
}


def promotion_row(player: Player) -> int:
    """The farthest row from the player's own side"""
    return BOARD_SIZE - 1 if player == Player.WHITE else 0


def is_promotion_square(square: Square, player: Player) -> bool:
    return square.row == promotion_row(player)


@dataclass(frozen=True)
class Piece:
    player: Player
    rank: Rank = Rank.PAWN

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> Self:
        return cls(Player(data["player"]), Rank(data["type"]))

    def to_dict(self) -> dict[str, str]:
        return {"player": self.player.value, "type": self.rank.value}

    @property
    def is_king(self) -> bool:
        return self.rank == Rank.KING

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.rank]

    def promoted(self) -> Self:
        """Pieces are immutable: promotion hands back a new (king) piece"""
        return replace(self, rank=Rank.KING)
