"""
Room record passed between the session service, the Room aggregate and the room stores.

Only plain values live here (strings, ints, the grid as nested lists), so the same record can be
stored as a JSON column or kept in memory without knowing about the domain classes.
"""

from dataclasses import dataclass
from typing import Optional

# Type aliases to make RoomModel easier to read
PieceCell = Optional[dict[str, str]]
BoardGrid = list[list[PieceCell]]


@dataclass
class RoomModel:
    """Transport-safe representation of a room used between Service, DB, and Room layers."""

    id: str
    name: str
    host_id: str
    host_name: str
    status: str
    board: BoardGrid
    player_to_move: str
    captured_white: int = 0
    captured_black: int = 0
    guest_id: Optional[str] = None
    guest_name: Optional[str] = None
