"""FastAPI application: the WebSocket transport of the room protocol, plus a health check."""

import asyncio
import logging
from typing import Callable, Optional
from uuid import uuid4

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from src.api.models import (
    ClientEvent,
    ClientMessage,
    ConnectedEvent,
    CreateRoomRequest,
    JoinRoomRequest,
    LeaveRoomRequest,
    MoveRequest,
    RematchRequest,
    ServerEvent,
)
from src.core.config import Settings
from src.core.exceptions import GameError
from src.db.database import make_engine, make_session_factory
from src.db.memory_repository import InMemoryRoomRepository
from src.db.repository import RoomRepository
from src.db.sql_repository import SQLRoomRepository
from src.services.session_service import Outbound, SessionCoordinator, error_message

logger = logging.getLogger(__name__)

# payload model per client event (get-rooms carries no payload)
REQUEST_MODELS: dict[ClientEvent, type[BaseModel]] = {
    ClientEvent.CREATE_ROOM: CreateRoomRequest,
    ClientEvent.JOIN_ROOM: JoinRoomRequest,
    ClientEvent.MAKE_MOVE: MoveRequest,
    ClientEvent.LEAVE_ROOM: LeaveRoomRequest,
    ClientEvent.REQUEST_REMATCH: RematchRequest,
}


def _handler(coordinator: SessionCoordinator, event: ClientEvent) -> Callable:
    return {
        ClientEvent.CREATE_ROOM: coordinator.create_room,
        ClientEvent.JOIN_ROOM: coordinator.join_room,
        ClientEvent.MAKE_MOVE: coordinator.make_move,
        ClientEvent.LEAVE_ROOM: coordinator.leave_room,
        ClientEvent.REQUEST_REMATCH: coordinator.request_rematch,
    }[event]


def dispatch(coordinator: SessionCoordinator, client_id: str, raw: str) -> list[Outbound]:
    """
    Route one inbound text frame to the coordinator
    ----

    Anything the coordinator or the request models reject ends up as a room-error for the sender only.
    """
    try:
        message = ClientMessage.model_validate_json(raw)
        if message.event == ClientEvent.GET_ROOMS:
            return coordinator.list_rooms(client_id)

        request = REQUEST_MODELS[message.event].model_validate(message.data)
        return _handler(coordinator, message.event)(client_id, request)
    except GameError as e:
        logger.info("Rejected request from %s: %s", client_id, e)
        return [error_message(client_id, str(e))]
    except ValidationError as e:
        logger.info("Malformed request from %s: %s", client_id, e.errors()[0]["msg"])
        return [error_message(client_id, f"Invalid request: {e.errors()[0]['msg']}")]


class ConnectionManager:
    """Open sockets by client id. Delivers the coordinator's outbound messages."""

    def __init__(self, is_current: Optional[Callable[[Outbound], bool]] = None) -> None:
        self.connections: dict[str, WebSocket] = {}
        self._pending: set[asyncio.Task] = set()
        # decides whether a delayed message is still worth sending
        self.is_current = is_current or (lambda message: True)

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        client_id = uuid4().hex
        self.connections[client_id] = websocket
        logger.info("Client %s connected (%d online)", client_id, len(self.connections))
        return client_id

    def disconnect(self, client_id: str) -> None:
        self.connections.pop(client_id, None)
        logger.info("Client %s disconnected (%d online)", client_id, len(self.connections))

    async def deliver(self, outbound: list[Outbound]) -> None:
        for message in outbound:
            if message.delay > 0:
                self._track(asyncio.create_task(self._deliver_later(message)))
            else:
                await self._send(message)

    def deliver_in_background(self, outbound: list[Outbound]) -> asyncio.Task:
        """Deliver from a task of its own, so the messages still go out if the caller gets cancelled."""
        return self._track(asyncio.create_task(self.deliver(outbound)))

    def _track(self, task: asyncio.Task) -> asyncio.Task:
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver_later(self, message: Outbound) -> None:
        await asyncio.sleep(message.delay)
        if not self.is_current(message):
            logger.debug("Dropping delayed %s for a closed room", message.event)
            return
        await self._send(message)

    async def _send(self, message: Outbound) -> None:
        recipients = list(self.connections) if message.is_broadcast else message.to
        payload = message.to_message()
        for client_id in recipients:
            websocket = self.connections.get(client_id)
            if websocket is None:
                # left in the meantime
                continue
            try:
                await websocket.send_json(payload)
            except Exception:
                logger.warning(
                    "Could not send %s to %s", message.event, client_id, exc_info=True
                )


def build_repository(settings: Settings) -> RoomRepository:
    if settings.room_store == "sql":
        session_factory = make_session_factory(make_engine(settings.database_url))
        return SQLRoomRepository(session_factory())
    return InMemoryRoomRepository()


def create_app(
    settings: Optional[Settings] = None,
    coordinator: Optional[SessionCoordinator] = None,
) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if coordinator is None:
        coordinator = SessionCoordinator(
            build_repository(settings),
            room_code_length=settings.room_code_length,
            match_start_delay=settings.match_start_delay,
        )
    manager = ConnectionManager(is_current=coordinator.is_current)

    app = FastAPI(title="Damas")
    app.state.coordinator = coordinator
    app.state.connections = manager

    @app.get("/health")
    async def health():
        return {"status": "ok", "rooms": len(coordinator.repo.list_rooms())}

    @app.websocket("/ws")
    async def room_socket(websocket: WebSocket):
        client_id = await manager.connect(websocket)
        try:
            await manager.deliver(
                [
                    Outbound(
                        ServerEvent.CONNECTED,
                        ConnectedEvent(client_id=client_id),
                        to=(client_id,),
                    )
                ]
            )
            while True:
                raw = await websocket.receive_text()
                await manager.deliver(dispatch(coordinator, client_id, raw))
        except WebSocketDisconnect:
            pass
        finally:
            manager.disconnect(client_id)
            # the handler may already be cancelled when the socket closes
            cleanup = manager.deliver_in_background(coordinator.disconnect(client_id))
            await asyncio.shield(cleanup)

    return app


app = create_app()
