"""Random agent - plays any legal card, draws only when it must."""

import random
from typing import Optional

from unoroom.engine import Action, PlayerView
from unoroom.engine.rules import PlayCard


class RandomAgent:
    """Agent that picks uniformly among its legal plays."""

    def __init__(self, name: str = "bot", seed: Optional[int] = None, forgets_uno: float = 0.0):
        self._name = name
        self._rng = random.Random(seed)
        self._forgets_uno = forgets_uno  # chance of not calling UNO at two cards

    @property
    def name(self) -> str:
        return self._name

    def wants_uno(self, player_view: PlayerView) -> bool:
        if len(player_view.my_hand) != 2:
            return False
        return self._rng.random() >= self._forgets_uno

    def get_action(
        self,
        player_view: PlayerView,
        legal_actions: list[Action],
        player_id: str,
    ) -> Action | None:
        if not legal_actions:
            return None
        # Prefer playing over drawing to make game progress
        plays = [a for a in legal_actions if isinstance(a, PlayCard)]
        if plays:
            return self._rng.choice(plays)
        return None
