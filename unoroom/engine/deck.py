"""Deck creation and shuffling."""

import random
import uuid
from typing import Callable, List, Optional, Sequence, TypeVar

from unoroom.engine.card import ACTION_TYPES, Card, CardType, Color

T = TypeVar("T")

DECK_SIZE = 109

_default_rng = random.Random()


def _new_card_id() -> str:
    return uuid.uuid4().hex


def create_deck(id_factory: Callable[[], str] = _new_card_id) -> List[Card]:
    """Create the 109-card deck, in a fixed (unshuffled) order.

    - 4 colors x (one 0, two each of 1-9, two each of skip/reverse/draw_two): 100 cards
    - 4 Wild, 4 Wild Draw Four, 1 Wild Shuffle Hands: 9 cards
    - Total: 109 cards, every one with its own id
    """
    cards: List[Card] = []

    for color in Color.concrete():
        # One zero per color
        cards.append(Card(id=id_factory(), color=color, type=CardType.NUMBER, value=0))
        # Two of each 1-9
        for value in range(1, 10):
            cards.append(Card(id=id_factory(), color=color, type=CardType.NUMBER, value=value))
            cards.append(Card(id=id_factory(), color=color, type=CardType.NUMBER, value=value))
        for card_type in ACTION_TYPES:
            cards.append(Card(id=id_factory(), color=color, type=card_type))
            cards.append(Card(id=id_factory(), color=color, type=card_type))

    for _ in range(4):
        cards.append(Card(id=id_factory(), color=Color.WILD, type=CardType.WILD))
        cards.append(Card(id=id_factory(), color=Color.WILD, type=CardType.WILD_DRAW_FOUR))
    cards.append(Card(id=id_factory(), color=Color.WILD, type=CardType.WILD_SHUFFLE_HANDS))

    return cards


def shuffle(cards: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a uniformly shuffled copy of ``cards`` (Fisher-Yates).

    The input is left untouched. Pass a seeded ``random.Random`` for
    reproducible orderings.
    """
    rng = rng or _default_rng
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
