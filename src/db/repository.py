"""Protocol repository (implemented in memory and with SQLAlchemy)"""

from typing import Optional, Protocol

from src.core.models import RoomModel


class RoomRepository(Protocol):
    """Room store orchestration. Rooms live only as long as the process (or the database behind it)."""

    def get_room(self, room_id: str) -> RoomModel | None:
        """Get room by code, if record exists."""
        ...

    def create_room(self, room: RoomModel) -> RoomModel:
        """Store new room (the code is chosen by the caller) and return the stored data."""
        ...

    def update_room(self, room_id: str, room: RoomModel) -> RoomModel | None:
        """Add new info to existing record."""
        ...

    def delete_room(self, room_id: str) -> RoomModel | None:
        """Remove a room's record."""
        ...

    def list_rooms(self, status: Optional[str] = None) -> list[RoomModel]:
        """All rooms, optionally only those with the given status, oldest first."""
        ...
