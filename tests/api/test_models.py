import pytest
from pydantic import ValidationError

from src.api.models import (
    ClientEvent,
    ClientMessage,
    CreateRoomRequest,
    JoinRoomRequest,
    MovePayload,
    MoveRequest,
    RoomPayload,
)
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Player, RoomStatus
from src.draughts.room import Room
from src.draughts.square import Square
from tests.helpers import move


# -- Validation - CreateRoomRequest / JoinRoomRequest --
def test_create_room_from_wire() -> None:
    request = CreateRoomRequest.model_validate(
        {"roomName": "  Final  ", "playerName": " Ana "}
    )
    assert request.room_name == "Final"
    assert request.player_name == "Ana"


def test_room_name_is_optional() -> None:
    assert CreateRoomRequest(player_name="Ana").room_name == ""


@pytest.mark.parametrize("invalid_name", ["", "   ", "x" * 41])
def test_invalid_player_name(invalid_name: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreateRoomRequest(player_name=invalid_name)


def test_room_codes_are_case_insensitive() -> None:
    request = JoinRoomRequest.model_validate({"roomId": " ab12cd ", "playerName": "Bia"})
    assert request.room_id == "AB12CD"


@pytest.mark.parametrize("invalid_code", ["", "AB-12", "AB 12"])
def test_invalid_room_code(invalid_code: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = JoinRoomRequest(room_id=invalid_code, player_name="Bia")


def test_missing_field() -> None:
    with pytest.raises(ValidationError):
        _ = JoinRoomRequest.model_validate({"playerName": "Bia"})


# -- Validation - MoveRequest --
def test_move_request_from_wire() -> None:
    request = MoveRequest.model_validate(
        {
            "roomId": "ab12cd",
            "move": {
                "from": {"row": 2, "col": 1},
                "to": {"row": 4, "col": 3},
                "captures": [{"row": 3, "col": 2}],
                "isPromotion": False,
            },
        }
    )
    assert request.room_id == "AB12CD"
    assert request.move.to_move() == move((2, 1), (4, 3), ((3, 2),))


def test_captures_are_optional() -> None:
    payload = MovePayload.model_validate(
        {"from": {"row": 2, "col": 1}, "to": {"row": 3, "col": 2}}
    )
    assert payload.to_move() == move((2, 1), (3, 2))


@pytest.mark.parametrize("row, col", [(-1, 0), (8, 1), (3, 8)])
def test_positions_must_be_on_the_board(row: int, col: int) -> None:
    with pytest.raises(ValidationError):
        _ = MovePayload.model_validate(
            {"from": {"row": row, "col": col}, "to": {"row": 3, "col": 2}}
        )


def test_move_payload_from_move() -> None:
    payload = MovePayload.from_move(move((6, 1), (7, 2), promotion=True))
    assert payload.from_square.to_square() == Square(6, 1)
    assert payload.model_dump(by_alias=True)["isPromotion"] is True


# -- Responses / envelopes --
def test_room_payload_from_model() -> None:
    room = Room.new_room("AB12CD", "", "host-1", "Ana")
    payload = RoomPayload.from_model(room.to_model())
    assert payload.status == RoomStatus.WAITING
    assert payload.current_player == Player.WHITE
    assert payload.guest_id is None

    wire = payload.model_dump(mode="json", by_alias=True)
    assert wire["hostName"] == "Ana"
    assert wire["board"][0][1] == {"player": "white", "type": "pawn"}
    assert wire["capturedWhite"] == 0


def test_client_envelope() -> None:
    message = ClientMessage.model_validate_json('{"event": "get-rooms"}')
    assert message.event == ClientEvent.GET_ROOMS
    assert message.data == {}


def test_unknown_client_event() -> None:
    with pytest.raises(ValidationError):
        _ = ClientMessage.model_validate_json('{"event": "resign", "data": {}}')
