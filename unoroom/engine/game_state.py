"""Game state for UNO."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from unoroom.engine.card import Card, CardType, Color


class GameStatus(str, Enum):
    """Lifecycle of a room's game. Only moves forward."""

    WAITING = "waiting"
    PLAYING = "playing"
    FINISHED = "finished"


@dataclass(frozen=True)
class Player:
    """A seated player.

    ``id`` is stable across reconnects; ``connection_id`` is whatever the
    transport currently uses to reach them.
    """

    id: str
    name: str
    connection_id: Optional[str] = None
    hand: tuple[Card, ...] = ()
    is_safe: bool = False  # called UNO
    connected: bool = True


@dataclass(frozen=True)
class GameState:
    """Immutable UNO game state. Engine operations return a new one."""

    room_id: str
    status: GameStatus
    players: tuple[Player, ...]
    deck: tuple[Card, ...] = ()  # draw pile, top is last
    discard_pile: tuple[Card, ...] = ()  # top is last
    current_turn_index: int = 0
    direction: int = 1  # 1 = clockwise, -1 = counter-clockwise
    active_color: Color = Color.RED  # what must be matched (wilds resolved)
    active_number: Optional[int] = None
    active_type: Optional[CardType] = None
    winner_id: Optional[str] = None
    history: tuple[str, ...] = field(default_factory=tuple)  # Log of events

    def top_discard(self) -> Optional[Card]:
        """Return the top card on the discard pile."""
        return self.discard_pile[-1] if self.discard_pile else None

    def player_index(self, player_id: str) -> int:
        """Seat index of ``player_id``, or -1 if not seated."""
        for i, player in enumerate(self.players):
            if player.id == player_id:
                return i
        return -1

    def find_player(self, player_id: str) -> Optional[Player]:
        idx = self.player_index(player_id)
        return self.players[idx] if idx >= 0 else None

    def current_player(self) -> Optional[Player]:
        if not self.players:
            return None
        return self.players[self.current_turn_index]

    def card_count(self) -> int:
        """Cards across draw pile, discard pile and every hand."""
        return len(self.deck) + len(self.discard_pile) + sum(len(p.hand) for p in self.players)


@dataclass
class PlayerView:
    """Filtered game state visible to a single player.

    Contains only that player's hand and public info; the draw pile is a count.
    """

    room_id: str
    status: GameStatus
    my_hand: List[Card]
    top_discard: Optional[Card]
    current_player: Optional[str]
    direction: int
    active_color: Color
    active_number: Optional[int]
    active_type: Optional[CardType]
    winner_id: Optional[str]
    player_order: tuple[str, ...]
    num_cards_per_player: Dict[str, int]  # player_id -> count
    safe_players: tuple[str, ...]
    connected_players: tuple[str, ...]
    deck_count: int
    history: List[str]  # Recent game events

    @classmethod
    def from_state(cls, state: GameState, player_id: str) -> "PlayerView":
        """Create a player view from full game state, hiding other players' hands."""
        me = state.find_player(player_id)
        current = state.current_player()
        return cls(
            room_id=state.room_id,
            status=state.status,
            my_hand=list(me.hand) if me else [],
            top_discard=state.top_discard(),
            current_player=current.id if current else None,
            direction=state.direction,
            active_color=state.active_color,
            active_number=state.active_number,
            active_type=state.active_type,
            winner_id=state.winner_id,
            player_order=tuple(p.id for p in state.players),
            num_cards_per_player={p.id: len(p.hand) for p in state.players},
            safe_players=tuple(p.id for p in state.players if p.is_safe),
            connected_players=tuple(p.id for p in state.players if p.connected),
            deck_count=len(state.deck),
            history=list(state.history[-10:]),  # Last 10 events
        )
