"""Card, Color and CardType for UNO."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Color(str, Enum):
    """Card colors. WILD marks colorless cards (and an unresolved starting wild)."""

    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    WILD = "wild"

    @classmethod
    def concrete(cls) -> tuple["Color", ...]:
        """The four colors a card can be played as."""
        return (cls.RED, cls.BLUE, cls.GREEN, cls.YELLOW)


class CardType(str, Enum):
    """What a card does when played."""

    NUMBER = "number"
    SKIP = "skip"
    REVERSE = "reverse"
    DRAW_TWO = "draw_two"
    WILD = "wild"
    WILD_DRAW_FOUR = "wild_draw_four"
    WILD_SHUFFLE_HANDS = "wild_shuffle_hands"


ACTION_TYPES = (CardType.SKIP, CardType.REVERSE, CardType.DRAW_TWO)
WILD_TYPES = (CardType.WILD, CardType.WILD_DRAW_FOUR, CardType.WILD_SHUFFLE_HANDS)


@dataclass(frozen=True)
class Card:
    """A UNO card.

    Number cards: concrete color, value 0-9.
    Action cards (skip, reverse, draw_two): concrete color, no value.
    Wild cards: color is Color.WILD, no value.

    ``id`` is unique per physical card, so two blue sevens are distinct.
    """

    id: str
    color: Color
    type: CardType
    value: Optional[int] = None

    def __post_init__(self) -> None:
        if self.type == CardType.NUMBER:
            if self.value is None or not 0 <= self.value <= 9:
                raise ValueError(f"Number card needs a value 0-9, got {self.value!r}")
        elif self.value is not None:
            raise ValueError(f"Only number cards carry a value: {self.type.value}")
        if self.type in WILD_TYPES and self.color != Color.WILD:
            raise ValueError("Wild cards must have color=WILD")
        if self.type not in WILD_TYPES and self.color == Color.WILD:
            raise ValueError("Non-wild cards must have a concrete color")

    @property
    def is_wild(self) -> bool:
        return self.color == Color.WILD

    def __str__(self) -> str:
        if self.is_wild:
            return self.type.value
        face = str(self.value) if self.type == CardType.NUMBER else self.type.value
        return f"{self.color.value}_{face}"
