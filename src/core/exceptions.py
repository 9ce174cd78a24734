"""
Custom exceptions.

Everything the domain or service layer raises on purpose derives from GameError,
so the coordinator can turn any of them into a message for the offending client.
"""


class GameError(Exception):
    """Base class for expected, user-facing failures."""


class GameStateError(GameError):
    """The request does not fit the current state of the game/room."""


class IllegalMoveError(GameError):
    """The move is not in the set of legal moves."""


class NotYourTurnError(GameError):
    """A move was submitted by the side that is not to move."""


class RoomNotFoundError(GameError):
    """Operating on a stale or unknown room code."""


class RoomNotJoinableError(GameError):
    """Room is already playing/ended or already has a guest."""


class RepositoryError(GameError):
    """Persistence layer could not find/store the record."""


class InvalidRequestError(GameError):
    """Malformed request. Raised from pydantic validators, it propagates as-is (not wrapped in a ValidationError)."""
