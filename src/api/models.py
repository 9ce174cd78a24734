"""Requests, events and the wire format of the room protocol

Every message is a JSON envelope {"event": <name>, "data": {...}} in both directions.
Field names on the wire are camelCase (the Move uses "from"/"to"), on the Python side snake_case.
"""

from enum import StrEnum
from typing import Any, Optional, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from src.core.exceptions import InvalidRequestError
from src.core.models import RoomModel
from src.core.shared_types import Player, Rank, RoomStatus
from src.draughts.moves import Move
from src.draughts.square import BOARD_SIZE, Square

PlayerName = str
RoomCode = str
MAX_NAME_LENGTH = 40


class ClientEvent(StrEnum):
    GET_ROOMS = "get-rooms"
    CREATE_ROOM = "create-room"
    JOIN_ROOM = "join-room"
    MAKE_MOVE = "make-move"
    LEAVE_ROOM = "leave-room"
    REQUEST_REMATCH = "request-rematch"


class ServerEvent(StrEnum):
    CONNECTED = "connected"
    ROOMS_LIST = "rooms-list"
    ROOM_CREATED = "room-created"
    ROOM_JOINED = "room-joined"
    PLAYER_JOINED = "player-joined"
    GAME_START = "game-start"
    MOVE_MADE = "move-made"
    PLAYER_LEFT = "player-left"
    REMATCH_ACCEPTED = "rematch-accepted"
    ROOM_ERROR = "room-error"


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- BOARD / MOVE SHAPES ---
class PositionPayload(WireModel):
    row: int = Field(ge=0, lt=BOARD_SIZE)
    col: int = Field(ge=0, lt=BOARD_SIZE)

    @classmethod
    def from_square(cls, square: Square) -> Self:
        return cls(row=square.row, col=square.col)

    def to_square(self) -> Square:
        return Square(self.row, self.col)


class PiecePayload(WireModel):
    player: Player
    type: Rank


BoardPayload = list[list[Optional[PiecePayload]]]


class MovePayload(WireModel):
    from_square: PositionPayload = Field(alias="from")
    to_square: PositionPayload = Field(alias="to")
    captures: list[PositionPayload] = Field(default_factory=list)
    is_promotion: bool = False

    @classmethod
    def from_move(cls, move: Move) -> Self:
        return cls.model_validate(move.to_dict())

    def to_move(self) -> Move:
        return Move(
            from_square=self.from_square.to_square(),
            to_square=self.to_square.to_square(),
            captures=tuple(c.to_square() for c in self.captures),
            promotion=self.is_promotion,
        )


class RoomSummary(WireModel):
    """What the lobby shows of an open room"""

    id: RoomCode
    name: str
    host_id: str
    host_name: PlayerName
    status: RoomStatus

    @classmethod
    def from_model(cls, model: RoomModel) -> Self:
        return cls(
            id=model.id,
            name=model.name,
            host_id=model.host_id,
            host_name=model.host_name,
            status=RoomStatus(model.status),
        )


class RoomPayload(RoomSummary):
    guest_id: Optional[str] = None
    guest_name: Optional[PlayerName] = None
    board: BoardPayload
    current_player: Player
    captured_white: int
    captured_black: int

    @classmethod
    def from_model(cls, model: RoomModel) -> Self:
        return cls(
            id=model.id,
            name=model.name,
            host_id=model.host_id,
            host_name=model.host_name,
            guest_id=model.guest_id,
            guest_name=model.guest_name,
            status=RoomStatus(model.status),
            board=model.board,
            current_player=Player(model.player_to_move),
            captured_white=model.captured_white,
            captured_black=model.captured_black,
        )


# --- REQUEST MODELS ---
def _clean_player_name(value: str) -> str:
    name = value.strip()
    if not name:
        raise InvalidRequestError("Player name cannot be empty.")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidRequestError(
            f"Player name cannot be longer than {MAX_NAME_LENGTH} characters."
        )
    return name


def _clean_room_code(value: str) -> str:
    """Room codes are case-insensitive: stored and compared upper case"""
    code = value.strip().upper()
    if not code.isalnum():
        raise InvalidRequestError(f"Cannot interpret {value!r} as a room code.")
    return code


class CreateRoomRequest(WireModel):
    room_name: str = ""
    player_name: PlayerName

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        return _clean_player_name(value)

    @field_validator("room_name")
    @classmethod
    def validate_room_name(cls, value: str) -> str:
        return value.strip()[:MAX_NAME_LENGTH]


class JoinRoomRequest(WireModel):
    room_id: RoomCode
    player_name: PlayerName

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        return _clean_player_name(value)

    @field_validator("room_id")
    @classmethod
    def validate_room_id(cls, value: str) -> str:
        return _clean_room_code(value)


class RoomRequest(WireModel):
    room_id: RoomCode

    @field_validator("room_id")
    @classmethod
    def validate_room_id(cls, value: str) -> str:
        return _clean_room_code(value)


class MoveRequest(RoomRequest):
    move: MovePayload


class LeaveRoomRequest(RoomRequest):
    pass


class RematchRequest(RoomRequest):
    pass


# --- EVENT (RESPONSE) MODELS ---
class ConnectedEvent(WireModel):
    client_id: str


class RoomsListEvent(WireModel):
    rooms: list[RoomSummary]


class RoomAssignedEvent(WireModel):
    """room-created (host, white) and room-joined (guest, black)"""

    room: RoomPayload
    color: Player


class PlayerJoinedEvent(WireModel):
    room: RoomPayload
    player_name: PlayerName
    player_id: str


class GameStartEvent(WireModel):
    """game-start and rematch-accepted"""

    room: RoomPayload
    board: BoardPayload
    current_player: Player


class MoveMadeEvent(WireModel):
    move: MovePayload
    board: BoardPayload
    current_player: Player
    captured_white: int
    captured_black: int
    game_ended: bool
    winner: Optional[Player] = None


class PlayerLeftEvent(WireModel):
    pass


class RoomErrorEvent(WireModel):
    message: str


# --- ENVELOPES ---
class ClientMessage(BaseModel):
    event: ClientEvent
    data: dict[str, Any] = Field(default_factory=dict)


class ServerMessage(BaseModel):
    event: ServerEvent
    data: dict[str, Any] = Field(default_factory=dict)
