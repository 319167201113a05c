"""Room server: registry, validation, room service and WebSocket transport."""

from unoroom.server.registry import RoomRegistry
from unoroom.server.service import Outbound, RoomService, sanitize_state

__all__ = ["RoomRegistry", "Outbound", "RoomService", "sanitize_state"]
