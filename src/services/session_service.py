"""
Orchestration of the networked matches: from client requests to the room aggregate and the room store,
and back out as messages for the clients.

The coordinator never talks to a socket. Every operation returns the messages (`Outbound`) to deliver,
and the transport delivers them. Operations are synchronous: one request is validated, applied and
answered before the next one is looked at, which is what keeps the two seats of a room from interleaving.
"""

import logging
import random
import string
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel

from src.api.models import (
    CreateRoomRequest,
    GameStartEvent,
    JoinRoomRequest,
    LeaveRoomRequest,
    MovePayload,
    MoveMadeEvent,
    MoveRequest,
    PlayerJoinedEvent,
    PlayerLeftEvent,
    RematchRequest,
    RoomAssignedEvent,
    RoomErrorEvent,
    RoomPayload,
    RoomsListEvent,
    RoomSummary,
    ServerEvent,
)
from src.core.exceptions import RepositoryError, RoomNotFoundError
from src.core.models import RoomModel
from src.core.shared_types import RoomStatus
from src.db.repository import RoomRepository
from src.draughts.room import GUEST_COLOR, HOST_COLOR, Room

logger = logging.getLogger(__name__)

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits


@dataclass(frozen=True)
class Outbound:
    """A message for one or more clients. `to=None` means every connected client."""

    event: ServerEvent
    payload: BaseModel
    to: Optional[tuple[str, ...]] = None
    # seconds to wait before delivering
    delay: float = 0.0
    # room the message is about; a delayed message is dropped once that room is gone
    room_id: Optional[str] = None

    @property
    def is_broadcast(self) -> bool:
        return self.to is None

    def to_message(self) -> dict:
        return {
            "event": self.event.value,
            "data": self.payload.model_dump(mode="json", by_alias=True),
        }


def error_message(client_id: str, message: str) -> Outbound:
    return Outbound(ServerEvent.ROOM_ERROR, RoomErrorEvent(message=message), to=(client_id,))


class SessionCoordinator:
    """Orchestration of rooms for networked draughts."""

    def __init__(
        self,
        repository: RoomRepository,
        room_code_length: int = 6,
        match_start_delay: float = 0.5,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repo = repository
        self.room_code_length = room_code_length
        self.match_start_delay = match_start_delay
        self.rng = rng or random.Random()

    # -- Protocol events ---
    def list_rooms(self, client_id: str) -> list[Outbound]:
        """Open rooms, for the client that asked."""
        return [self._rooms_list(to=(client_id,))]

    def create_room(self, client_id: str, request: CreateRoomRequest) -> list[Outbound]:
        """Host opens a room and waits in it. Everybody gets the new lobby."""
        room = Room.new_room(
            room_id=self._new_room_code(),
            name=request.room_name,
            host_id=client_id,
            host_name=request.player_name,
        )
        stored = self.repo.create_room(room.to_model())
        logger.info("Room %s (%r) created by %s", stored.id, stored.name, client_id)

        return [
            Outbound(
                ServerEvent.ROOM_CREATED,
                RoomAssignedEvent(room=RoomPayload.from_model(stored), color=HOST_COLOR),
                to=(client_id,),
            ),
            self._rooms_list(),
        ]

    def join_room(self, client_id: str, request: JoinRoomRequest) -> list[Outbound]:
        """
        Second player takes the guest seat
        ----

        joiner: the room and its color, host: who joined, both (once the join settled): game start,
        everybody: the lobby without this room.
        """
        stored_model = self.repo.get_room(request.room_id)
        if stored_model is None:
            raise RoomNotFoundError("Room not found.")

        room = Room.from_model(stored_model)
        room.register_guest(client_id, request.player_name)
        joined = self._store(room)
        logger.info("%s joined room %s, match starting", client_id, room.id)

        payload = RoomPayload.from_model(joined)
        return [
            Outbound(
                ServerEvent.ROOM_JOINED,
                RoomAssignedEvent(room=payload, color=GUEST_COLOR),
                to=(client_id,),
            ),
            Outbound(
                ServerEvent.PLAYER_JOINED,
                PlayerJoinedEvent(
                    room=payload, player_name=request.player_name, player_id=client_id
                ),
                to=(room.host_id,),
            ),
            Outbound(
                ServerEvent.GAME_START,
                GameStartEvent(
                    room=payload, board=joined.board, current_player=room.player_to_move
                ),
                to=tuple(room.participants()),
                delay=self.match_start_delay,
                room_id=room.id,
            ),
            self._rooms_list(),
        ]

    def make_move(self, client_id: str, request: MoveRequest) -> list[Outbound]:
        """
        A participant submits a move
        ----

        The sender already knows the result of its own move: the new authoritative state only goes to the opponent.
        A room that no longer exists (e.g. cleaned up after a disconnect) makes this a no-op.
        """
        stored_model = self.repo.get_room(request.room_id)
        if stored_model is None:
            logger.debug("Move for unknown room %s ignored", request.room_id)
            return []

        room = Room.from_model(stored_model)
        accepted_move, outcome = room.make_move(client_id, request.move.to_move())
        after_move = self._store(room)

        if outcome.ended:
            logger.info("Room %s ended, winner: %s", room.id, outcome.winner)

        opponent = room.opponent_of(client_id)
        if opponent is None:
            return []
        return [
            Outbound(
                ServerEvent.MOVE_MADE,
                MoveMadeEvent(
                    move=MovePayload.from_move(accepted_move),
                    board=after_move.board,
                    current_player=room.player_to_move,
                    captured_white=after_move.captured_white,
                    captured_black=after_move.captured_black,
                    game_ended=outcome.ended,
                    winner=outcome.winner,
                ),
                to=(opponent,),
            )
        ]

    def leave_room(self, client_id: str, request: LeaveRoomRequest) -> list[Outbound]:
        """Leaving closes the whole room: the opponent is told, the lobby is refreshed."""
        stored_model = self.repo.get_room(request.room_id)
        if stored_model is None:
            logger.debug("Leave for unknown room %s ignored", request.room_id)
            return []

        room = Room.from_model(stored_model)
        # only a participant may close the room
        room.color_of(client_id)
        return [*self._close_room(room, client_id), self._rooms_list()]

    def request_rematch(self, client_id: str, request: RematchRequest) -> list[Outbound]:
        """Fresh board for the same two players, whatever the room's status."""
        stored_model = self.repo.get_room(request.room_id)
        if stored_model is None:
            logger.debug("Rematch for unknown room %s ignored", request.room_id)
            return []

        room = Room.from_model(stored_model)
        room.color_of(client_id)
        room.rematch()
        reset = self._store(room)
        logger.info("Rematch in room %s", room.id)

        return [
            Outbound(
                ServerEvent.REMATCH_ACCEPTED,
                GameStartEvent(
                    room=RoomPayload.from_model(reset),
                    board=reset.board,
                    current_player=room.player_to_move,
                ),
                to=tuple(room.participants()),
            )
        ]

    def disconnect(self, client_id: str) -> list[Outbound]:
        """Implicit leave of every room the client sat in."""
        outbound: list[Outbound] = []
        for model in self.repo.list_rooms():
            if client_id in (model.host_id, model.guest_id):
                outbound.extend(self._close_room(Room.from_model(model), client_id))
        outbound.append(self._rooms_list())
        return outbound

    def is_current(self, outbound: Outbound) -> bool:
        """False for a message about a room that has been closed since it was produced."""
        return outbound.room_id is None or self.repo.get_room(outbound.room_id) is not None

    # -- Internal helpers --
    def open_rooms(self) -> list[RoomModel]:
        return self.repo.list_rooms(status=RoomStatus.WAITING.value)

    def _rooms_list(self, to: Optional[tuple[str, ...]] = None) -> Outbound:
        rooms = [RoomSummary.from_model(model) for model in self.open_rooms()]
        return Outbound(ServerEvent.ROOMS_LIST, RoomsListEvent(rooms=rooms), to=to)

    def _close_room(self, room: Room, leaving_client: str) -> list[Outbound]:
        """Delete the room and tell whoever is left."""
        self.repo.delete_room(room.id)
        logger.info("Room %s closed, %s left", room.id, leaving_client)

        opponent = room.opponent_of(leaving_client)
        if opponent is None:
            return []
        return [Outbound(ServerEvent.PLAYER_LEFT, PlayerLeftEvent(), to=(opponent,))]

    def _store(self, room: Room) -> RoomModel:
        """Write the room back and raise error if it vanished in between."""
        stored = self.repo.update_room(room.id, room.to_model())
        if stored is None:
            raise RepositoryError(f"Room with {room.id=} not found.")
        return stored

    def _new_room_code(self) -> str:
        """Short, human-typeable code that is not in use yet"""
        while True:
            code = "".join(
                self.rng.choice(ROOM_CODE_ALPHABET) for _ in range(self.room_code_length)
            )
            if self.repo.get_room(code) is None:
                return code
