"""Shared fixtures: hand-built tables and rigged decks."""

import random

import pytest

from unoroom.engine import Card, CardType, Color, GameState, GameStatus, Player, create_deck
import unoroom.engine.game as game_module


def num(card_id: str, color: Color, value: int) -> Card:
    return Card(id=card_id, color=color, type=CardType.NUMBER, value=value)


def action(card_id: str, color: Color, card_type: CardType) -> Card:
    return Card(id=card_id, color=color, type=card_type)


def wild(card_id: str, card_type: CardType = CardType.WILD) -> Card:
    return Card(id=card_id, color=Color.WILD, type=card_type)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def table():
    """Build a PLAYING state from explicit hands.

    The draw pile defaults to 20 red number cards; the discard pile to one
    card matching ``active_color``.
    """

    def build(
        hands: dict,
        deck=None,
        discard=None,
        active_color: Color = Color.BLUE,
        active_number=None,
        active_type=None,
        turn: int = 0,
        direction: int = 1,
        safe=(),
        disconnected=(),
        status: GameStatus = GameStatus.PLAYING,
    ) -> GameState:
        players = tuple(
            Player(
                id=pid,
                name=pid.upper(),
                connection_id=f"conn-{pid}",
                hand=tuple(cards),
                is_safe=pid in safe,
                connected=pid not in disconnected,
            )
            for pid, cards in hands.items()
        )
        if deck is None:
            deck = [num(f"deck{i}", Color.RED, i % 10) for i in range(20)]
        if discard is None:
            top_color = Color.GREEN if active_color == Color.WILD else active_color
            discard = [num("top", top_color, 3)]
        return GameState(
            room_id="ROOM1",
            status=status,
            players=players,
            deck=tuple(deck),
            discard_pile=tuple(discard),
            current_turn_index=turn,
            direction=direction,
            active_color=active_color,
            active_number=active_number,
            active_type=active_type,
        )

    return build


@pytest.fixture
def rig_start(monkeypatch):
    """Make start_game turn up a card of the requested type.

    The first shuffle keeps order; any reshuffle after that moves the last
    card to the bottom, so a re-flipped card changes.
    """

    def rig(top_type: CardType, player_count: int, second_type=None) -> None:
        cards = create_deck()
        dealt = player_count * 7
        top = next(c for c in cards if c.type == top_type)
        rest = [c for c in cards if c is not top]
        if second_type is not None:
            second = next(c for c in rest if c.type == second_type)
            rest = [c for c in rest if c is not second]
            # Behind the first flip, ready for the reshuffle
            ordered = rest[: len(rest) - dealt] + [second, top] + rest[len(rest) - dealt:]
        else:
            ordered = rest[: len(rest) - dealt] + [top] + rest[len(rest) - dealt:]

        calls = {"n": 0}

        def fake_shuffle(seq, rng=None):
            calls["n"] += 1
            seq = list(seq)
            if calls["n"] == 1 or not seq:
                return seq
            return [seq[-1]] + seq[:-1]

        monkeypatch.setattr(game_module, "create_deck", lambda: list(ordered))
        monkeypatch.setattr(game_module, "shuffle", fake_shuffle)

    return rig
