"""UNO rules: card legality, turn arithmetic and legal actions."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from unoroom.engine.card import Card, CardType, Color
from unoroom.engine.game_state import GameState, GameStatus


@dataclass
class PlayCard:
    """Action: play a card. For wilds, chosen_color is required."""

    card: Card
    chosen_color: Optional[Color] = None


@dataclass
class DrawCard:
    """Action: draw a card (when no legal play or player chooses to draw)."""

    pass


Action = Union[PlayCard, DrawCard]


def can_play_card(card: Card, state: GameState) -> bool:
    """Check if a card can be played against the state's active color/number/type.

    Any single match is enough. An active color of WILD is only left by a
    wild starting card and lets the first player lay anything.
    """
    # Wild can always be played
    if card.is_wild:
        return True
    if state.active_color == Color.WILD:
        return True
    # Match by color
    if card.color == state.active_color:
        return True
    # Match by number
    if card.type == CardType.NUMBER:
        return state.active_number is not None and card.value == state.active_number
    # Match by symbol
    return state.active_type is not None and card.type == state.active_type


def is_wild_draw4_illegal(hand: Iterable[Card], active_color: Color) -> bool:
    """True if the hand held a non-wild card of ``active_color``.

    Playing a Wild Draw Four while holding such a card is a bluff.
    """
    return any(not c.is_wild and c.color == active_color for c in hand)


def next_player_index(current: int, direction: int, player_count: int, steps: int = 1) -> int:
    """Seat reached after moving ``steps`` seats in ``direction``."""
    if player_count < 1:
        raise ValueError("player_count must be at least 1")
    # Python's % is already non-negative for a positive modulus
    return (current + direction * steps) % player_count


def legal_plays(state: GameState, player_id: str) -> List[PlayCard]:
    """Every card play open to ``player_id`` right now.

    Wild cards are expanded into one action per concrete color.
    """
    if state.status != GameStatus.PLAYING:
        return []
    current = state.current_player()
    if current is None or current.id != player_id:
        return []

    actions: List[PlayCard] = []
    for card in current.hand:
        if not can_play_card(card, state):
            continue
        if card.is_wild:
            for color in Color.concrete():
                actions.append(PlayCard(card=card, chosen_color=color))
        else:
            actions.append(PlayCard(card=card))
    return actions


def get_legal_actions(state: GameState, player_id: str) -> List[Action]:
    """Return all legal actions for the current player, drawing included."""
    plays: List[Action] = list(legal_plays(state, player_id))
    current = state.current_player()
    if state.status == GameStatus.PLAYING and current is not None and current.id == player_id:
        # Can always draw if we have no play or choose to
        plays.append(DrawCard())
    return plays
