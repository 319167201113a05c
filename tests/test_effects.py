"""Card effects: skip, reverse, draw two, wilds and hand shuffling."""

import pytest

from conftest import action, num, wild
from unoroom.engine import (
    CardType,
    Color,
    ErrorKind,
    LegalityError,
    PossessionError,
    PreconditionError,
    TurnError,
    attempt,
    play_card,
)

FILLER = {
    "p2": [num("b1", Color.RED, 1), num("b2", Color.RED, 2)],
    "p3": [num("c1", Color.RED, 4), num("c2", Color.RED, 5)],
}


def _three(table, p1_hand, **kwargs):
    return table({"p1": p1_hand, **FILLER}, **kwargs)


def test_skip_skips_next_player(table) -> None:
    state = _three(table, [action("s", Color.BLUE, CardType.SKIP), num("x", Color.RED, 9)])
    after = play_card(state, "p1", "s")
    assert after.current_turn_index == 2
    assert after.direction == 1
    assert after.active_type == CardType.SKIP
    assert after.active_number is None


def test_reverse_three_players(table) -> None:
    state = _three(table, [action("r", Color.BLUE, CardType.REVERSE), num("x", Color.RED, 9)])
    after = play_card(state, "p1", "r")
    assert after.direction == -1
    assert after.current_turn_index == 2


def test_reverse_acts_as_skip_with_two_players(table) -> None:
    state = table({"p1": [action("r", Color.BLUE, CardType.REVERSE), num("x", Color.RED, 9)], "p2": FILLER["p2"]})
    after = play_card(state, "p1", "r")
    assert after.direction == 1
    assert after.current_turn_index == 0


def test_draw_two_gives_cards_and_skips(table) -> None:
    state = _three(table, [action("d2", Color.BLUE, CardType.DRAW_TWO), num("x", Color.RED, 9)])
    after = play_card(state, "p1", "d2")
    assert len(after.players[1].hand) == len(state.players[1].hand) + 2
    assert after.current_turn_index == 2
    assert after.card_count() == state.card_count()


def test_draw_two_follows_direction(table) -> None:
    state = _three(table, [action("d2", Color.BLUE, CardType.DRAW_TWO), num("x", Color.RED, 9)], direction=-1)
    after = play_card(state, "p1", "d2")
    assert len(after.players[2].hand) == 4
    assert len(after.players[1].hand) == 2
    assert after.current_turn_index == 1


def test_wild_draw_four_gives_cards_and_skips(table) -> None:
    state = _three(table, [wild("w4", CardType.WILD_DRAW_FOUR), num("x", Color.RED, 9)], active_color=Color.RED)
    after = play_card(state, "p1", "w4", Color.YELLOW)
    assert after.active_color == Color.YELLOW
    assert after.active_type == CardType.WILD_DRAW_FOUR
    assert len(after.players[1].hand) == len(state.players[1].hand) + 4
    assert after.current_turn_index == 2


def test_wild_draw_four_is_not_gated_by_bluff(table) -> None:
    # p1 holds a red card yet may still play the Wild Draw Four on red
    state = _three(table, [wild("w4", CardType.WILD_DRAW_FOUR), num("x", Color.RED, 9)], active_color=Color.RED)
    after = play_card(state, "p1", "w4", Color.GREEN)
    assert len(after.players[1].hand) == 6


def test_wild_resolves_chosen_color(table) -> None:
    state = _three(table, [wild("w"), num("x", Color.RED, 9)])
    after = play_card(state, "p1", "w", Color.GREEN)
    assert after.active_color == Color.GREEN
    assert after.top_discard().color == Color.WILD
    assert after.current_turn_index == 1


def test_wild_accepts_plain_string_color(table) -> None:
    state = _three(table, [wild("w"), num("x", Color.RED, 9)])
    after = play_card(state, "p1", "w", "red")
    assert after.active_color == Color.RED


@pytest.mark.parametrize("chosen", [None, Color.WILD, "purple"])
def test_wild_needs_concrete_color(table, chosen) -> None:
    state = _three(table, [wild("w"), num("x", Color.RED, 9)])
    with pytest.raises(LegalityError):
        play_card(state, "p1", "w", chosen)


def test_number_card_advances_one(table) -> None:
    state = _three(table, [num("n", Color.GREEN, 3), num("x", Color.RED, 9)], active_color=Color.BLUE, active_number=3)
    after = play_card(state, "p1", "n")
    assert after.current_turn_index == 1
    assert after.active_color == Color.GREEN
    assert after.active_number == 3


def test_starting_wild_first_player_picks_color(table) -> None:
    state = _three(table, [num("n", Color.RED, 7), num("x", Color.RED, 9)], active_color=Color.WILD, active_type=CardType.WILD)
    after = play_card(state, "p1", "n")
    assert after.active_color == Color.RED


def test_shuffle_hands_redeals_everything(table, rng) -> None:
    p1_hand = [wild("ws", CardType.WILD_SHUFFLE_HANDS), num("a1", Color.RED, 0)]
    state = table(
        {
            "p1": p1_hand,
            "p2": [num("b1", Color.RED, 1), num("b2", Color.RED, 2), num("b3", Color.RED, 3)],
            "p3": [num("c1", Color.RED, 4), num("c2", Color.RED, 5)],
        }
    )
    after = play_card(state, "p1", "ws", Color.BLUE, rng=rng)
    # 6 cards left after the play, dealt round-robin from p2
    assert [len(p.hand) for p in after.players] == [2, 2, 2]
    before_ids = {c.id for p in state.players for c in p.hand} - {"ws"}
    assert {c.id for p in after.players for c in p.hand} == before_ids
    assert after.current_turn_index == 1
    assert after.active_color == Color.BLUE
    assert after.card_count() == state.card_count()


def test_shuffle_hands_uneven_pool_starts_left_of_player(table, rng) -> None:
    state = table(
        {
            "p1": [wild("ws", CardType.WILD_SHUFFLE_HANDS), num("a1", Color.RED, 0)],
            "p2": [num("b1", Color.RED, 1)],
            "p3": [num("c1", Color.RED, 4), num("c2", Color.RED, 5)],
        }
    )
    after = play_card(state, "p1", "ws", Color.BLUE, rng=rng)
    # 4 cards: p2, p3, p1, p2
    assert [len(p.hand) for p in after.players] == [1, 2, 1]


def test_not_your_turn(table) -> None:
    state = _three(table, [num("x", Color.BLUE, 9)])
    with pytest.raises(TurnError):
        play_card(state, "p2", "b1")


def test_card_not_in_hand(table) -> None:
    state = _three(table, [num("x", Color.BLUE, 9)])
    with pytest.raises(PossessionError):
        play_card(state, "p1", "b1")


def test_card_does_not_match(table) -> None:
    state = _three(table, [num("x", Color.RED, 9), num("y", Color.RED, 8)], active_color=Color.BLUE, active_number=3)
    result = attempt(play_card, state, "p1", "x")
    assert not result.ok
    assert result.error_kind == ErrorKind.LEGALITY
    assert result.state is state
    assert len(state.players[0].hand) == 2


def test_play_requires_game_in_progress(table) -> None:
    from unoroom.engine import GameStatus

    state = _three(table, [num("x", Color.BLUE, 9)], status=GameStatus.WAITING)
    with pytest.raises(PreconditionError):
        play_card(state, "p1", "x")


def test_unknown_player(table) -> None:
    state = _three(table, [num("x", Color.BLUE, 9)])
    result = attempt(play_card, state, "ghost", "x")
    assert result.error_kind == ErrorKind.LOOKUP
