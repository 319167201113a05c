"""UNO state transitions.

Every operation takes a GameState and returns a new one; the input is never
modified. All checks run before any change, so a refused action raises a
GameError and leaves the caller's state exactly as it was.
"""

import logging
import random
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from unoroom.engine.card import Card, CardType, Color
from unoroom.engine.deck import create_deck, shuffle
from unoroom.engine.errors import (
    LegalityError,
    LookupFailure,
    PossessionError,
    PreconditionError,
    TurnError,
)
from unoroom.engine.game_state import GameState, GameStatus, Player
from unoroom.engine.rules import can_play_card, next_player_index

logger = logging.getLogger(__name__)

HAND_SIZE = 7
MIN_PLAYERS = 2
MAX_PLAYERS = 10


@dataclass
class _Draft:
    """Mutable working copy of the card-bearing parts of a GameState."""

    hands: List[List[Card]]
    safe: List[bool]
    deck: List[Card]
    discard: List[Card]
    history: List[str]

    @classmethod
    def of(cls, state: GameState) -> "_Draft":
        return cls(
            hands=[list(p.hand) for p in state.players],
            safe=[p.is_safe for p in state.players],
            deck=list(state.deck),
            discard=list(state.discard_pile),
            history=list(state.history),
        )

    def commit(self, state: GameState, **changes) -> GameState:
        players = tuple(
            replace(p, hand=tuple(self.hands[i]), is_safe=self.safe[i])
            for i, p in enumerate(state.players)
        )
        return replace(
            state,
            players=players,
            deck=tuple(self.deck),
            discard_pile=tuple(self.discard),
            history=tuple(self.history),
            **changes,
        )

    def refill(self, rng: Optional[random.Random]) -> None:
        # Keep the visible top card; everything under it becomes the new draw pile
        if len(self.discard) <= 1:
            return
        top = self.discard[-1]
        self.deck = shuffle(self.discard[:-1], rng)
        self.discard = [top]

    def draw(self, seat: int, count: int, rng: Optional[random.Random]) -> int:
        """Move up to ``count`` cards to a hand; returns how many arrived."""
        drawn = 0
        for _ in range(count):
            if not self.deck:
                self.refill(rng)
            if not self.deck:
                logger.warning("Draw pile and discard pile exhausted; %d of %d cards drawn", drawn, count)
                break
            self.hands[seat].append(self.deck.pop())
            drawn += 1
        # A declared UNO no longer protects a hand that grew past one card
        if len(self.hands[seat]) > 1:
            self.safe[seat] = False
        return drawn


def _require_player(state: GameState, player_id: str) -> int:
    idx = state.player_index(player_id)
    if idx < 0:
        raise LookupFailure(f"Player {player_id} not found")
    return idx


def create_game(room_id: str, players: Iterable[Player]) -> GameState:
    """Open a room in WAITING with the given seated players and no cards."""
    return GameState(
        room_id=room_id,
        status=GameStatus.WAITING,
        players=tuple(players),
        current_turn_index=0,
        direction=1,
        active_color=Color.RED,  # Placeholder, set during start
    )


def join_game(state: GameState, player: Player, max_players: int = MAX_PLAYERS) -> GameState:
    """Seat a new player at the end of the table before the game starts."""
    if state.status != GameStatus.WAITING:
        raise PreconditionError("Game already in progress")
    if len(state.players) >= max_players:
        raise PreconditionError("Room is full")
    if state.player_index(player.id) >= 0:
        raise PreconditionError(f"Player {player.id} already seated")
    history = state.history + (f"{player.name} joined",)
    return replace(state, players=state.players + (player,), history=history)


def start_game(state: GameState, rng: Optional[random.Random] = None) -> GameState:
    """Shuffle a fresh deck, deal seven each and turn up the starting card."""
    if state.status != GameStatus.WAITING:
        raise PreconditionError("Game already started")
    if len(state.players) < MIN_PLAYERS:
        raise PreconditionError("Not enough players to start.")
    if len(state.players) > MAX_PLAYERS:
        raise PreconditionError(f"Too many players to start (max {MAX_PLAYERS}).")

    draft = _Draft(
        hands=[[] for _ in state.players],
        safe=[False for _ in state.players],
        deck=shuffle(create_deck(), rng),
        discard=[],
        history=list(state.history),
    )
    for seat in range(len(state.players)):
        draft.draw(seat, HAND_SIZE, rng)

    top = draft.deck.pop()
    # Cannot start with Wild Draw Four: put it back, reshuffle and flip again
    while top.type == CardType.WILD_DRAW_FOUR:
        draft.deck.append(top)
        draft.deck = shuffle(draft.deck, rng)
        top = draft.deck.pop()
    draft.discard = [top]
    draft.history.append(f"Game started; first card {top}")

    player_count = len(state.players)
    direction = 1
    turn = 0
    active_color = top.color
    if top.is_wild:
        # First player may lay any card and pick the color with it
        active_color = Color.WILD
    elif top.type == CardType.SKIP:
        turn = 1
    elif top.type == CardType.REVERSE:
        # Dealer (last seat) opens and play runs the other way
        direction = -1
        turn = player_count - 1
    elif top.type == CardType.DRAW_TWO:
        draft.draw(0, 2, rng)
        draft.history.append(f"{state.players[0].name} drew 2 cards (starting card)")
        turn = 1

    if not 0 <= turn < player_count:
        turn = 0

    new_state = draft.commit(
        state,
        status=GameStatus.PLAYING,
        current_turn_index=turn,
        direction=direction,
        active_color=active_color,
        active_number=top.value,
        active_type=top.type,
        winner_id=None,
    )
    logger.debug("Game %s started with %s", state.room_id, top)
    return new_state


def play_card(
    state: GameState,
    player_id: str,
    card_id: str,
    chosen_color: Optional[Color] = None,
    rng: Optional[random.Random] = None,
) -> GameState:
    """Play ``card_id`` from the current player's hand and apply its effect."""
    if state.status != GameStatus.PLAYING:
        raise PreconditionError("Game not in progress")
    seat = _require_player(state, player_id)
    if seat != state.current_turn_index:
        raise TurnError("Not your turn")

    player = state.players[seat]
    card = next((c for c in player.hand if c.id == card_id), None)
    if card is None:
        raise PossessionError("Card not in hand")
    if not can_play_card(card, state):
        raise LegalityError("Illegal move: Card does not match state")
    active_color = _resolve_color(chosen_color) if card.is_wild else card.color

    draft = _Draft.of(state)
    draft.hands[seat] = [c for c in draft.hands[seat] if c.id != card_id]
    draft.discard.append(card)

    desc = f"{player.name} played {card}"
    if card.is_wild:
        desc += f" (chose {active_color.value})"
    draft.history.append(desc)

    player_count = len(state.players)
    direction = state.direction
    turn = state.current_turn_index

    if card.type == CardType.SKIP:
        turn = next_player_index(turn, direction, player_count, 2)
    elif card.type == CardType.REVERSE:
        if player_count == 2:
            # Acts as a skip with two players
            turn = next_player_index(turn, direction, player_count, 2)
        else:
            direction = -direction
            turn = next_player_index(turn, direction, player_count, 1)
    elif card.type in (CardType.DRAW_TWO, CardType.WILD_DRAW_FOUR):
        # Next player draws and loses their turn
        penalty = 2 if card.type == CardType.DRAW_TWO else 4
        victim = next_player_index(turn, direction, player_count, 1)
        drawn = draft.draw(victim, penalty, rng)
        draft.history.append(f"{state.players[victim].name} drew {drawn} cards")
        turn = next_player_index(turn, direction, player_count, 2)
    elif card.type == CardType.WILD_SHUFFLE_HANDS:
        _shuffle_hands(draft, seat, direction, rng)
        draft.history.append("All hands were shuffled and redealt")
        turn = next_player_index(turn, direction, player_count, 1)
    else:
        turn = next_player_index(turn, direction, player_count, 1)

    status = state.status
    winner_id = None
    remaining = len(draft.hands[seat])
    if remaining == 1:
        # Must call UNO again
        draft.safe[seat] = False
    elif remaining == 0:
        status = GameStatus.FINISHED
        winner_id = player.id
        draft.history.append(f"{player.name} WON!")
        logger.info("Game %s won by %s", state.room_id, player.id)

    return draft.commit(
        state,
        status=status,
        current_turn_index=turn,
        direction=direction,
        active_color=active_color,
        active_number=card.value,
        active_type=card.type,
        winner_id=winner_id,
    )


def _resolve_color(chosen_color: Optional[Color]) -> Color:
    try:
        color = Color(chosen_color) if chosen_color is not None else None
    except ValueError:
        color = None
    if color is None or color == Color.WILD:
        raise LegalityError("Must select a color for Wild cards")
    return color


def _shuffle_hands(draft: _Draft, dealer: int, direction: int, rng: Optional[random.Random]) -> None:
    """Pool every hand, shuffle and deal it all out starting left of ``dealer``."""
    pool: List[Card] = []
    for hand in draft.hands:
        pool.extend(hand)
    draft.hands = [[] for _ in draft.hands]
    pool = shuffle(pool, rng)

    player_count = len(draft.hands)
    target = next_player_index(dealer, direction, player_count, 1)
    while pool:
        draft.hands[target].append(pool.pop())
        target = next_player_index(target, direction, player_count, 1)


def draw_cards(
    state: GameState,
    player_id: str,
    count: int,
    rng: Optional[random.Random] = None,
) -> GameState:
    """Give ``player_id`` up to ``count`` cards, refilling from the discard pile.

    Unknown players are ignored. If both piles run dry the hand grows by
    fewer cards than asked.
    """
    seat = state.player_index(player_id)
    if seat < 0:
        return state
    draft = _Draft.of(state)
    drawn = draft.draw(seat, count, rng)
    if drawn == 1:
        draft.history.append(f"{state.players[seat].name} drew a card")
    else:
        draft.history.append(f"{state.players[seat].name} drew {drawn} cards")
    return draft.commit(state)


def refill_deck_from_discard(state: GameState, rng: Optional[random.Random] = None) -> GameState:
    """Shuffle everything but the top discard card into a new draw pile."""
    if len(state.discard_pile) <= 1:
        return state
    draft = _Draft.of(state)
    draft.refill(rng)
    return draft.commit(state)


def pass_turn(state: GameState, player_id: str) -> GameState:
    """End the current player's turn without playing (after drawing)."""
    if state.status != GameStatus.PLAYING:
        raise PreconditionError("Game not in progress")
    seat = _require_player(state, player_id)
    if seat != state.current_turn_index:
        raise TurnError("Not your turn")
    turn = next_player_index(seat, state.direction, len(state.players), 1)
    history = state.history + (f"{state.players[seat].name} passed",)
    return replace(state, current_turn_index=turn, history=history)


def call_uno(state: GameState, player_id: str) -> GameState:
    """Mark a player as having called UNO.

    Allowed at any hand size; it only matters at one or two cards.
    """
    seat = _require_player(state, player_id)
    player = state.players[seat]
    players = list(state.players)
    players[seat] = replace(player, is_safe=True)
    history = state.history + (f"{player.name} called UNO",)
    return replace(state, players=tuple(players), history=history)


def challenge_uno(
    state: GameState,
    challenger_id: str,
    victim_id: str,
    rng: Optional[random.Random] = None,
) -> tuple[GameState, bool]:
    """Accuse ``victim_id`` of sitting on one card without calling UNO.

    Returns the new state and whether the challenge succeeded. A successful
    challenge makes the victim draw two; a failed one changes nothing.
    """
    seat = state.player_index(victim_id)
    if seat < 0:
        raise LookupFailure("Victim not found")
    victim = state.players[seat]
    if len(victim.hand) != 1 or victim.is_safe:
        return state, False

    draft = _Draft.of(state)
    draft.draw(seat, 2, rng)
    draft.safe[seat] = False
    challenger = state.find_player(challenger_id)
    by = challenger.name if challenger else challenger_id
    draft.history.append(f"{by} caught {victim.name} without UNO (+2)")
    return draft.commit(state), True


def handle_disconnect(state: GameState, player_id: str) -> GameState:
    """Mark a player disconnected and move the turn off them if needed."""
    seat = state.player_index(player_id)
    if seat < 0:
        return state

    players = list(state.players)
    players[seat] = replace(players[seat], connected=False)
    turn = state.current_turn_index
    if state.status == GameStatus.PLAYING and turn == seat:
        # Bounded so a table of disconnected players does not spin forever
        for _ in range(len(players)):
            turn = next_player_index(turn, state.direction, len(players), 1)
            if players[turn].connected:
                break
    history = state.history + (f"{players[seat].name} disconnected",)
    return replace(state, players=tuple(players), current_turn_index=turn, history=history)


def handle_reconnect(state: GameState, player_id: str, connection_id: str) -> GameState:
    """Bind a returning player to their new connection."""
    seat = state.player_index(player_id)
    if seat < 0:
        raise LookupFailure("Player not found in game")
    players = list(state.players)
    players[seat] = replace(players[seat], connection_id=connection_id, connected=True)
    history = state.history + (f"{players[seat].name} reconnected",)
    return replace(state, players=tuple(players), history=history)
