"""FastAPI app: health check plus one WebSocket endpoint for all room traffic."""

import json
import logging
import time
import uuid
from typing import Dict, List, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from unoroom.config import Settings
from unoroom.server.service import Outbound, RoomService

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks live sockets by connection id and delivers outbound messages."""

    def __init__(self) -> None:
        self._sockets: Dict[str, WebSocket] = {}

    def add(self, connection_id: str, websocket: WebSocket) -> None:
        self._sockets[connection_id] = websocket

    def remove(self, connection_id: str) -> None:
        self._sockets.pop(connection_id, None)

    async def deliver(self, messages: List[Outbound]) -> None:
        for message in messages:
            websocket = self._sockets.get(message.connection_id)
            if websocket is None:
                continue
            try:
                await websocket.send_json({"event": message.event, "data": message.payload})
            except Exception as e:
                # Delivery failures belong to the dropped socket, not the sender
                logger.warning(
                    "Failed to deliver %s",
                    message.event,
                    extra={"meta": {"connection_id": message.connection_id, "error": str(e)}},
                )


def create_app(settings: Optional[Settings] = None, service: Optional[RoomService] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    service = service or RoomService(
        draw_debounce_ms=settings.draw_debounce_ms,
        max_players=settings.max_players,
    )
    connections = ConnectionManager()
    started = time.monotonic()

    app = FastAPI(title="unoroom")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.state.service = service

    @app.get("/health")
    def health():
        return {"status": "ok", "uptime": time.monotonic() - started, "rooms": len(service.registry)}

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        connections.add(connection_id, websocket)
        logger.info("New connection", extra={"meta": {"connection_id": connection_id}})
        try:
            while True:
                text = await websocket.receive_text()
                try:
                    raw = json.loads(text)
                except json.JSONDecodeError:
                    raw = {"type": "invalid"}
                await connections.deliver(service.handle(connection_id, raw))
        except WebSocketDisconnect:
            pass
        finally:
            connections.remove(connection_id)
            await connections.deliver(service.disconnect(connection_id))

    return app
