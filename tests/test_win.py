"""Win detection."""

import pytest

from conftest import action, num, wild
from unoroom.engine import CardType, Color, GameStatus, PreconditionError, play_card


def test_playing_last_card_wins(table) -> None:
    state = table({"p1": [num("last", Color.BLUE, 4)], "p2": [num("x", Color.RED, 1)]})
    after = play_card(state, "p1", "last")
    assert after.status == GameStatus.FINISHED
    assert after.winner_id == "p1"
    assert after.players[0].hand == ()


def test_game_ending_draw_two_still_applies(table) -> None:
    state = table(
        {
            "p1": [action("d2", Color.BLUE, CardType.DRAW_TWO)],
            "p2": [num("b1", Color.RED, 1)],
            "p3": [num("c1", Color.RED, 4)],
        }
    )
    after = play_card(state, "p1", "d2")
    assert after.status == GameStatus.FINISHED
    assert after.winner_id == "p1"
    assert len(after.players[1].hand) == 3
    assert after.card_count() == state.card_count()


def test_game_ending_wild_draw_four_still_applies(table) -> None:
    state = table({"p1": [wild("w4", CardType.WILD_DRAW_FOUR)], "p2": [num("b1", Color.RED, 1)]})
    after = play_card(state, "p1", "w4", Color.RED)
    assert after.winner_id == "p1"
    assert len(after.players[1].hand) == 5
    assert after.active_color == Color.RED


def test_last_card_shuffle_hands_does_not_win(table, rng) -> None:
    # The redeal hands p1 cards again before the win check
    state = table(
        {
            "p1": [wild("ws", CardType.WILD_SHUFFLE_HANDS)],
            "p2": [num("b1", Color.RED, 1), num("b2", Color.RED, 2), num("b3", Color.RED, 3), num("b4", Color.RED, 4)],
        }
    )
    after = play_card(state, "p1", "ws", Color.GREEN, rng=rng)
    assert after.status == GameStatus.PLAYING
    assert [len(p.hand) for p in after.players] == [2, 2]


def test_finished_game_rejects_plays(table) -> None:
    state = table({"p1": [num("last", Color.BLUE, 4)], "p2": [num("x", Color.BLUE, 1)]})
    after = play_card(state, "p1", "last")
    with pytest.raises(PreconditionError):
        play_card(after, "p2", "x")
