"""Implementation of (Room)Repository using SQLAlchemy"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import RoomModel
from src.db.schema import DBRoom


class SQLRoomRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_room(self, room_id: str) -> RoomModel | None:
        """Get room by code, if record exists."""
        room_db = self._fetch_room(room_id)
        if room_db:
            return self._to_model(room_db)
        return None

    def create_room(self, room: RoomModel) -> RoomModel:
        """Store new room and return the stored data."""
        if self._fetch_room(room.id) is not None:
            raise RepositoryError(f"Room with {room.id=} already exists.")

        room_db = DBRoom(
            id=room.id,
            name=room.name,
            host_id=room.host_id,
            host_name=room.host_name,
            guest_id=room.guest_id,
            guest_name=room.guest_name,
            status=room.status,
            board=room.board,
            player_to_move=room.player_to_move,
            captured_white=room.captured_white,
            captured_black=room.captured_black,
        )
        self.db.add(room_db)
        self.db.commit()
        self.db.refresh(room_db)
        return self._to_model(room_db)

    def update_room(self, room_id: str, room: RoomModel) -> RoomModel | None:
        """Add new info to existing record."""
        room_db = self._fetch_room(room_id)
        if not room_db:
            return None
        room_db.name = room.name
        room_db.guest_id = room.guest_id
        room_db.guest_name = room.guest_name
        room_db.status = room.status
        room_db.board = room.board
        room_db.player_to_move = room.player_to_move
        room_db.captured_white = room.captured_white
        room_db.captured_black = room.captured_black
        self.db.commit()
        self.db.refresh(room_db)
        return self._to_model(room_db)

    def delete_room(self, room_id: str) -> RoomModel | None:
        """Remove a room's record."""
        room_db = self._fetch_room(room_id)
        if not room_db:
            return None
        room_model = self._to_model(room_db)
        self.db.delete(room_db)
        self.db.commit()
        return room_model

    def list_rooms(self, status: Optional[str] = None) -> list[RoomModel]:
        query = select(DBRoom).order_by(DBRoom.created_at)
        if status is not None:
            query = query.where(DBRoom.status == status)
        return [self._to_model(room_db) for room_db in self.db.scalars(query)]

    def _fetch_room(self, room_id: str) -> DBRoom | None:
        query = select(DBRoom).where(DBRoom.id == room_id)
        return self.db.scalar(query)

    def _to_model(self, room_db: DBRoom) -> RoomModel:
        """Convert SQLAlchemy model to data transfer model."""
        return RoomModel(
            id=room_db.id,
            name=room_db.name,
            host_id=room_db.host_id,
            host_name=room_db.host_name,
            guest_id=room_db.guest_id,
            guest_name=room_db.guest_name,
            status=room_db.status,
            board=room_db.board,
            player_to_move=room_db.player_to_move,
            captured_white=room_db.captured_white,
            captured_black=room_db.captured_black,
        )
