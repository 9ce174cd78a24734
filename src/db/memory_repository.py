"""Implementation of (Room)Repository kept in a dictionary. Default store of the coordinator."""

from copy import deepcopy
from typing import Optional

from src.core.exceptions import RepositoryError
from src.core.models import RoomModel


class InMemoryRoomRepository:
    """Rooms stored in process memory. Records are copied in and out, so callers never share state with the store."""

    def __init__(self) -> None:
        self._rooms: dict[str, RoomModel] = {}

    def get_room(self, room_id: str) -> RoomModel | None:
        room = self._rooms.get(room_id)
        return deepcopy(room) if room is not None else None

    def create_room(self, room: RoomModel) -> RoomModel:
        if room.id in self._rooms:
            raise RepositoryError(f"Room with {room.id=} already exists.")
        self._rooms[room.id] = deepcopy(room)
        return deepcopy(room)

    def update_room(self, room_id: str, room: RoomModel) -> RoomModel | None:
        if room_id not in self._rooms:
            return None
        self._rooms[room_id] = deepcopy(room)
        return deepcopy(room)

    def delete_room(self, room_id: str) -> RoomModel | None:
        room = self._rooms.pop(room_id, None)
        return deepcopy(room) if room is not None else None

    def list_rooms(self, status: Optional[str] = None) -> list[RoomModel]:
        return [
            deepcopy(room)
            for room in self._rooms.values()
            if status is None or room.status == status
        ]

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._rooms.clear()
