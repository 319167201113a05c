"""Room service: turns client actions into engine calls and outbound messages.

The service knows nothing about sockets. Each handler returns a list of
``Outbound`` messages addressed to connection ids; the transport delivers them.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from unoroom.engine import (
    ActionResult,
    Card,
    Color,
    ErrorKind,
    GameError,
    GameState,
    MAX_PLAYERS,
    GameStatus,
    Player,
    PreconditionError,
    TurnError,
    attempt,
    call_uno,
    challenge_uno,
    create_game,
    draw_cards,
    handle_disconnect,
    handle_reconnect,
    join_game,
    pass_turn,
    play_card,
    start_game,
)
from unoroom.server.registry import RoomRegistry
from unoroom.server.schemas import (
    ClientMessage,
    CreateRoomRequest,
    JoinRoomRequest,
    PlayCardRequest,
    TargetPlayerRequest,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outbound:
    """One message for one connection."""

    connection_id: str
    event: str
    payload: Dict[str, Any]


@dataclass(frozen=True)
class Session:
    room_id: str
    player_id: str


def _card_dict(card: Card) -> Dict[str, Any]:
    return {"id": card.id, "color": card.color.value, "type": card.type.value, "value": card.value}


def sanitize_state(state: GameState, viewer_id: str) -> Dict[str, Any]:
    """JSON-ready copy of ``state`` safe to send to ``viewer_id``.

    The viewer sees their own hand; everyone else's hand is empty with a
    count. The draw pile is never sent, only its size.
    """
    return {
        "room_id": state.room_id,
        "status": state.status.value,
        "players": [
            {
                "id": p.id,
                "name": p.name,
                "hand": [_card_dict(c) for c in p.hand] if p.id == viewer_id else [],
                "card_count": len(p.hand),
                "is_safe": p.is_safe,
                "connected": p.connected,
            }
            for p in state.players
        ],
        "deck": [],
        "deck_count": len(state.deck),
        "discard_pile": [_card_dict(c) for c in state.discard_pile],
        "current_turn_index": state.current_turn_index,
        "direction": state.direction,
        "active_color": state.active_color.value,
        "active_number": state.active_number,
        "active_type": state.active_type.value if state.active_type else None,
        "winner_id": state.winner_id,
        "history": list(state.history[-10:]),
    }


class RoomService:
    """Lobby and gameplay handlers for every room in one registry."""

    def __init__(
        self,
        registry: Optional[RoomRegistry] = None,
        draw_debounce_ms: int = 500,
        max_players: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.registry = registry or RoomRegistry()
        self._debounce = draw_debounce_ms / 1000.0
        self._max_players = min(max_players, MAX_PLAYERS)
        self._clock = clock
        self._sessions: Dict[str, Session] = {}  # connection_id -> session
        self._last_draw: Dict[str, float] = {}  # player_id -> time

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def handle(self, connection_id: str, raw: Any) -> List[Outbound]:
        """Validate one raw client message and run its handler."""
        event = raw.get("type", "unknown") if isinstance(raw, dict) else "unknown"
        try:
            message = ClientMessage.model_validate(raw)
            handler = getattr(self, message.type)
            return handler(connection_id, message.data)
        except ValidationError as e:
            return [self._error(connection_id, event, "validation", str(e))]
        except GameError as e:
            return [self._error(connection_id, event, e.kind.value, str(e))]

    def session_for(self, connection_id: str) -> Optional[Session]:
        return self._sessions.get(connection_id)

    # ------------------------------------------------------------------
    # Lobby
    # ------------------------------------------------------------------

    def create_room(self, connection_id: str, data: Dict[str, Any]) -> List[Outbound]:
        request = CreateRoomRequest.model_validate(data)
        room_id = uuid.uuid4().hex[:6].upper()
        player_id = str(uuid.uuid4())
        host = Player(id=player_id, name=request.player_name, connection_id=connection_id)

        game = create_game(room_id, [host])
        with self.registry.lock(room_id):
            self.registry.save(game)
        self._sessions[connection_id] = Session(room_id, player_id)

        logger.info("Room created", extra={"meta": {"room_id": room_id, "player_id": player_id}})
        return [
            Outbound(connection_id, "room_created", {"room_id": room_id, "player_id": player_id}),
            Outbound(connection_id, "sync_state", sanitize_state(game, player_id)),
        ]

    def join_room(self, connection_id: str, data: Dict[str, Any]) -> List[Outbound]:
        request = JoinRoomRequest.model_validate(data)
        room_id = request.room_id.upper()

        with self.registry.lock(room_id):
            game = self._load(room_id, "Room not found")
            existing = game.find_player(request.player_id) if request.player_id else None

            if existing is not None:
                game = handle_reconnect(game, existing.id, connection_id)
                self.registry.save(game)
                # Older connections for this player lose their session
                for stale in [c for c, s in self._sessions.items() if s.player_id == existing.id and c != connection_id]:
                    del self._sessions[stale]
                self._sessions[connection_id] = Session(room_id, existing.id)
                logger.info("Player reconnected", extra={"meta": {"room_id": room_id, "player_id": existing.id}})
                out = [Outbound(connection_id, "sync_state", sanitize_state(game, existing.id))]
                out += self._to_room(game, "notification", {"message": f"{existing.name} reconnected"})
                return out

            player_id = str(uuid.uuid4())
            newcomer = Player(id=player_id, name=request.player_name, connection_id=connection_id)
            result = attempt(join_game, game, newcomer, max_players=self._max_players)
            if not result.ok:
                return [self._failure(connection_id, "join_room", result)]
            game = result.state
            self.registry.save(game)
            self._sessions[connection_id] = Session(room_id, player_id)

        logger.info("Player joined", extra={"meta": {"room_id": room_id, "player_id": player_id}})
        out = [
            Outbound(connection_id, "sync_state", sanitize_state(game, player_id)),
            Outbound(connection_id, "joined_success", {"player_id": player_id, "room_id": room_id}),
        ]
        for p in game.players:
            if p.id != player_id and p.connected and p.connection_id:
                out.append(Outbound(p.connection_id, "sync_state", sanitize_state(game, p.id)))
        return out

    # ------------------------------------------------------------------
    # Gameplay
    # ------------------------------------------------------------------

    def start_game(self, connection_id: str, data: Dict[str, Any]) -> List[Outbound]:
        session = self._session(connection_id)
        with self.registry.lock(session.room_id):
            game = self._load(session.room_id)
            if not game.players or game.players[0].id != session.player_id:
                raise PreconditionError("Only the host can start")
            result = attempt(start_game, game)
            if not result.ok:
                return [self._failure(connection_id, "start_game", result)]
            self.registry.save(result.state)
        logger.info("Game started", extra={"meta": {"room_id": session.room_id}})
        return self._broadcast_state(result.state, "game_started")

    def play_card(self, connection_id: str, data: Dict[str, Any]) -> List[Outbound]:
        session = self._session(connection_id)
        request = PlayCardRequest.model_validate(data)
        color = Color(request.selected_color) if request.selected_color else None
        with self.registry.lock(session.room_id):
            game = self._load(session.room_id)
            result = attempt(play_card, game, session.player_id, request.card_id, color)
            if not result.ok:
                return [self._failure(connection_id, "play_card", result)]
            self.registry.save(result.state)

        out = self._broadcast_state(result.state, "state_update")
        if result.state.status == GameStatus.FINISHED:
            out += self._to_room(result.state, "game_over", {"winner_id": result.state.winner_id})
        return out

    def draw_card(self, connection_id: str, data: Dict[str, Any]) -> List[Outbound]:
        session = self._session(connection_id)
        now = self._clock()
        last = self._last_draw.get(session.player_id)
        if last is not None and now - last < self._debounce:
            logger.debug("Ignoring rapid draw", extra={"meta": {"player_id": session.player_id}})
            return []

        with self.registry.lock(session.room_id):
            game = self._require_turn(self._load(session.room_id), session.player_id)
            self._last_draw[session.player_id] = now
            game = draw_cards(game, session.player_id, 1)
            self.registry.save(game)
        return self._broadcast_state(game, "state_update")

    def pass_turn(self, connection_id: str, data: Dict[str, Any]) -> List[Outbound]:
        session = self._session(connection_id)
        with self.registry.lock(session.room_id):
            result = attempt(pass_turn, self._load(session.room_id), session.player_id)
            if not result.ok:
                return [self._failure(connection_id, "pass_turn", result)]
            self.registry.save(result.state)
        return self._broadcast_state(result.state, "state_update")

    def call_uno(self, connection_id: str, data: Dict[str, Any]) -> List[Outbound]:
        session = self._session(connection_id)
        with self.registry.lock(session.room_id):
            result = attempt(call_uno, self._load(session.room_id), session.player_id)
            if not result.ok:
                return [self._failure(connection_id, "call_uno", result)]
            self.registry.save(result.state)
        out = self._to_room(result.state, "uno_called", {"player_id": session.player_id})
        return out + self._broadcast_state(result.state, "state_update")

    def challenge(self, connection_id: str, data: Dict[str, Any]) -> List[Outbound]:
        session = self._session(connection_id)
        request = TargetPlayerRequest.model_validate(data)
        with self.registry.lock(session.room_id):
            game = self._load(session.room_id)
            result = attempt(challenge_uno, game, session.player_id, request.target_player_id)
            if not result.ok:
                return [self._failure(connection_id, "challenge", result)]
            self.registry.save(result.state)

        out = self._to_room(
            result.state,
            "challenge_result",
            {"challenger": session.player_id, "victim": request.target_player_id, "success": result.value},
        )
        return out + self._broadcast_state(result.state, "state_update")

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def disconnect(self, connection_id: str) -> List[Outbound]:
        session = self._sessions.pop(connection_id, None)
        if session is None:
            return []
        with self.registry.lock(session.room_id):
            game = self.registry.get(session.room_id)
            if game is None:
                return []
            player = game.find_player(session.player_id)
            if player is not None and player.connection_id != connection_id:
                # Already reconnected on a newer connection
                return []
            game = handle_disconnect(game, session.player_id)
            self.registry.save(game)

        logger.info("Player disconnected", extra={"meta": {"room_id": session.room_id, "player_id": session.player_id}})
        out = self._to_room(game, "player_disconnected", {"player_id": session.player_id})
        if game.status == GameStatus.PLAYING:
            out += self._broadcast_state(game, "state_update")
        return out

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _session(self, connection_id: str) -> Session:
        session = self._sessions.get(connection_id)
        if session is None:
            raise PreconditionError("You are not in a game room")
        return session

    def _load(self, room_id: str, missing: str = "Game not found") -> GameState:
        game = self.registry.get(room_id)
        if game is None:
            raise PreconditionError(missing)
        return game

    @staticmethod
    def _require_turn(game: GameState, player_id: str) -> GameState:
        if game.status != GameStatus.PLAYING:
            raise PreconditionError("Game not in progress")
        current = game.current_player()
        if current is None or current.id != player_id:
            raise TurnError("Not your turn")
        return game

    def _broadcast_state(self, game: GameState, event: str) -> List[Outbound]:
        """Every connected player gets their own sanitized view."""
        return [
            Outbound(p.connection_id, event, sanitize_state(game, p.id))
            for p in game.players
            if p.connected and p.connection_id
        ]

    @staticmethod
    def _to_room(game: GameState, event: str, payload: Dict[str, Any]) -> List[Outbound]:
        return [
            Outbound(p.connection_id, event, payload)
            for p in game.players
            if p.connected and p.connection_id
        ]

    def _failure(self, connection_id: str, event: str, result: ActionResult) -> Outbound:
        kind = result.error_kind or ErrorKind.PRECONDITION
        return self._error(connection_id, event, kind.value, result.message)

    @staticmethod
    def _error(connection_id: str, event: str, kind: str, message: str) -> Outbound:
        logger.warning("Error handling %s", event, extra={"meta": {"kind": kind, "message": message}})
        return Outbound(connection_id, "error", {"message": message, "event": event, "kind": kind})
