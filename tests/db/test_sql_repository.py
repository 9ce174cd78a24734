"""Unit tests for src/db/sql_repository.py and src/db/memory_repository.py"""

import pytest
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import RoomModel
from src.core.shared_types import RoomStatus
from src.db.database import make_engine, make_session_factory
from src.db.memory_repository import InMemoryRoomRepository
from src.db.repository import RoomRepository
from src.db.sql_repository import SQLRoomRepository
from src.draughts.board import Board


def make_room_model(room_id: str = "ABC123", status: RoomStatus = RoomStatus.WAITING) -> RoomModel:
    return RoomModel(
        id=room_id,
        name="Sala de Ana",
        host_id="host-1",
        host_name="Ana",
        status=status.value,
        board=Board.starting_position().to_grid(),
        player_to_move="white",
    )


@pytest.fixture(params=["memory", "sql"])
def repo(request, db_session_repo: Session) -> RoomRepository:
    """Both room stores have to behave the same"""
    if request.param == "sql":
        return SQLRoomRepository(db_session_repo)
    return InMemoryRoomRepository()


def test_create_room(repo: RoomRepository) -> None:
    model = make_room_model()
    stored = repo.create_room(model)
    assert isinstance(stored, RoomModel)
    assert stored == model


def test_create_duplicate_room(repo: RoomRepository) -> None:
    repo.create_room(make_room_model())
    with pytest.raises(RepositoryError):
        repo.create_room(make_room_model())


def test_get_room(repo: RoomRepository) -> None:
    expected = repo.create_room(make_room_model())
    assert repo.get_room("ABC123") == expected


def test_get_unknown_room(repo: RoomRepository) -> None:
    assert repo.get_room("NOPE00") is None
    repo.create_room(make_room_model())
    assert repo.get_room("NOPE00") is None


def test_update_room(repo: RoomRepository) -> None:
    repo.create_room(make_room_model())
    changed = make_room_model(status=RoomStatus.PLAYING)
    changed.guest_id = "guest-1"
    changed.guest_name = "Bia"
    changed.player_to_move = "black"
    changed.captured_white = 3
    changed.board[2][1] = None

    updated = repo.update_room("ABC123", changed)
    assert updated == changed
    assert repo.get_room("ABC123") == changed


def test_update_unknown_room(repo: RoomRepository) -> None:
    assert repo.update_room("NOPE00", make_room_model("NOPE00")) is None
    assert repo.get_room("NOPE00") is None


def test_delete_room(repo: RoomRepository) -> None:
    model = repo.create_room(make_room_model())
    assert repo.delete_room("ABC123") == model
    assert repo.get_room("ABC123") is None
    assert repo.delete_room("ABC123") is None


def test_list_rooms_by_status(repo: RoomRepository) -> None:
    repo.create_room(make_room_model("AAAAAA"))
    repo.create_room(make_room_model("BBBBBB", RoomStatus.PLAYING))
    repo.create_room(make_room_model("CCCCCC"))

    assert {room.id for room in repo.list_rooms()} == {"AAAAAA", "BBBBBB", "CCCCCC"}
    waiting = repo.list_rooms(status=RoomStatus.WAITING.value)
    assert {room.id for room in waiting} == {"AAAAAA", "CCCCCC"}


def test_stored_room_is_not_shared_with_caller(repo: RoomRepository) -> None:
    model = make_room_model()
    repo.create_room(model)
    model.board[2][1] = None
    model.status = RoomStatus.ENDED.value

    stored = repo.get_room("ABC123")
    assert stored is not None
    assert stored.board[2][1] == {"player": "white", "type": "pawn"}
    assert stored.status == RoomStatus.WAITING.value


def test_deleted_memory_record_is_a_copy() -> None:
    repo = InMemoryRoomRepository()
    repo.create_room(make_room_model())
    stored = repo._rooms["ABC123"]

    deleted = repo.delete_room("ABC123")
    assert deleted == stored
    assert deleted is not stored


def test_shared_database_between_sessions() -> None:
    """Two coordinators on the same database see each other's rooms"""
    session_factory = make_session_factory(make_engine("sqlite:///:memory:"))
    first = SQLRoomRepository(session_factory())
    second = SQLRoomRepository(session_factory())

    first.create_room(make_room_model())
    assert second.get_room("ABC123") is not None
