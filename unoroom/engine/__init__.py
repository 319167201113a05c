"""Game engine for UNO."""

from unoroom.engine.card import Card, CardType, Color
from unoroom.engine.deck import DECK_SIZE, create_deck, shuffle
from unoroom.engine.errors import (
    ActionResult,
    ErrorKind,
    GameError,
    LegalityError,
    LookupFailure,
    PossessionError,
    PreconditionError,
    TurnError,
    attempt,
)
from unoroom.engine.game import (
    MAX_PLAYERS,
    call_uno,
    challenge_uno,
    create_game,
    draw_cards,
    handle_disconnect,
    handle_reconnect,
    join_game,
    pass_turn,
    play_card,
    refill_deck_from_discard,
    start_game,
)
from unoroom.engine.game_state import GameState, GameStatus, Player, PlayerView
from unoroom.engine.rules import (
    Action,
    PlayCard,
    DrawCard,
    can_play_card,
    get_legal_actions,
    is_wild_draw4_illegal,
    legal_plays,
    next_player_index,
)

__all__ = [
    "Card",
    "CardType",
    "Color",
    "DECK_SIZE",
    "create_deck",
    "shuffle",
    "ActionResult",
    "ErrorKind",
    "GameError",
    "LegalityError",
    "LookupFailure",
    "PossessionError",
    "PreconditionError",
    "TurnError",
    "attempt",
    "MAX_PLAYERS",
    "call_uno",
    "challenge_uno",
    "create_game",
    "draw_cards",
    "handle_disconnect",
    "handle_reconnect",
    "join_game",
    "pass_turn",
    "play_card",
    "refill_deck_from_discard",
    "start_game",
    "GameState",
    "GameStatus",
    "Player",
    "PlayerView",
    "Action",
    "PlayCard",
    "DrawCard",
    "can_play_card",
    "get_legal_actions",
    "is_wild_draw4_illegal",
    "legal_plays",
    "next_player_index",
]
