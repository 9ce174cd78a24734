"""
A Room is the authoritative record of one networked match.

Like Game for local play, the Room is the domain-level entrypoint for the session coordinator:
it holds who sits where, whose turn it is and the running captured counts, and validates every request
against the room's state machine:

    waiting --(guest joins)--> playing --(game end)--> ended
                                  ^                      |
                                  +------(rematch)-------+
"""

from dataclasses import dataclass
from typing import Optional, Self

from src.core.exceptions import (
    GameStateError,
    NotYourTurnError,
    RoomNotJoinableError,
)
from src.core.models import RoomModel
from src.core.shared_types import Player, RoomStatus
from src.draughts.board import Board
from src.draughts.game import MatchState
from src.draughts.game_end import GameEnd
from src.draughts.moves import Move, find_legal_move

# Seats are fixed by role
HOST_COLOR = Player.WHITE
GUEST_COLOR = Player.BLACK


@dataclass
class Room:
    id: str
    name: str
    host_id: str
    host_name: str
    status: RoomStatus
    state: MatchState
    guest_id: Optional[str] = None
    guest_name: Optional[str] = None

    @classmethod
    def new_room(cls, room_id: str, name: str, host_id: str, host_name: str) -> Self:
        """Fresh room waiting for a second player, with the standard starting position."""
        return cls(
            id=room_id,
            name=name or f"Sala de {host_name}",
            host_id=host_id,
            host_name=host_name,
            status=RoomStatus.WAITING,
            state=MatchState.starting_position(),
        )

    @classmethod
    def from_model(cls, model: RoomModel) -> Self:
        """Define how to construct a Room from the information the Service layer actually has"""
        if model.status not in [status.value for status in RoomStatus]:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(RoomStatus)}"
            )
        state = MatchState(
            board=Board.from_grid(model.board),
            player_to_move=Player(model.player_to_move),
            captured_white=model.captured_white,
            captured_black=model.captured_black,
        )
        return cls(
            id=model.id,
            name=model.name,
            host_id=model.host_id,
            host_name=model.host_name,
            status=RoomStatus(model.status),
            state=state,
            guest_id=model.guest_id,
            guest_name=model.guest_name,
        )

    def to_model(self) -> RoomModel:
        """Encode back into a format the Service layer uses"""
        return RoomModel(
            id=self.id,
            name=self.name,
            host_id=self.host_id,
            host_name=self.host_name,
            status=self.status.value,
            board=self.state.board.to_grid(),
            player_to_move=self.state.player_to_move.value,
            captured_white=self.state.captured_white,
            captured_black=self.state.captured_black,
            guest_id=self.guest_id,
            guest_name=self.guest_name,
        )

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def player_to_move(self) -> Player:
        return self.state.player_to_move

    def is_participant(self, client_id: str) -> bool:
        return client_id in (self.host_id, self.guest_id)

    def color_of(self, client_id: str) -> Player:
        """The side is derived from who sent the request, never from the payload"""
        if client_id == self.host_id:
            return HOST_COLOR
        if self.guest_id is not None and client_id == self.guest_id:
            return GUEST_COLOR
        raise GameStateError("You are not seated in this room.")

    def opponent_of(self, client_id: str) -> Optional[str]:
        if client_id == self.host_id:
            return self.guest_id
        if client_id == self.guest_id:
            return self.host_id
        return None

    def participants(self) -> list[str]:
        return [client for client in (self.host_id, self.guest_id) if client is not None]

    def register_guest(self, guest_id: str, guest_name: str) -> None:
        """Registering the 2nd player to an open room"""
        if self.status != RoomStatus.WAITING:
            raise RoomNotJoinableError("This room is already playing.")
        if self.guest_id is not None:
            raise RoomNotJoinableError("This room is full.")
        if guest_id == self.host_id:
            raise RoomNotJoinableError("You cannot join your own room.")

        self.guest_id = guest_id
        self.guest_name = guest_name
        self.status = RoomStatus.PLAYING

    def make_move(self, client_id: str, move: Move) -> tuple[Move, GameEnd]:
        """
        Attempt a move on behalf of a participant
        -----

        1. room must be playing
        2. the sender's seat must be the side to move
        3. the move must be legal (the generated move is the one applied)
        4. update board, counts and turn; end the room if the game is over
        """
        if self.status != RoomStatus.PLAYING:
            raise GameStateError(f"Game is not in progress. status: {self.status}")

        color = self.color_of(client_id)
        if color != self.player_to_move:
            raise NotYourTurnError("It is not your turn.")

        accepted_move = find_legal_move(self.board, color, move)
        self.state = self.state.play(accepted_move)

        outcome = self.state.outcome()
        if outcome.ended:
            self.status = RoomStatus.ENDED
        return accepted_move, outcome

    def rematch(self) -> None:
        """Reset board, turn and counts. Needs both players still attached."""
        if self.guest_id is None:
            raise GameStateError("Waiting for an opponent to join.")
        self.state = MatchState.starting_position()
        self.status = RoomStatus.PLAYING
