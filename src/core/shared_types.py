"""
Type definitions used across layers
"""

from enum import StrEnum


class Player(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Player":
        return Player.BLACK if self == Player.WHITE else Player.WHITE


class Rank(StrEnum):
    PAWN = "pawn"
    KING = "king"


class RoomStatus(StrEnum):
    WAITING = "waiting"
    PLAYING = "playing"
    ENDED = "ended"


class GameStatus(StrEnum):
    """Status of a local (single device) game."""

    PLAYING = "playing"
    ENDED = "ended"


class GameMode(StrEnum):
    PVP = "pvp"
    PVE = "pve"


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
