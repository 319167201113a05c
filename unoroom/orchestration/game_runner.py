"""Single game runner."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from unoroom.engine import (
    GameState,
    GameStatus,
    Player,
    PlayerView,
    call_uno,
    challenge_uno,
    create_game,
    draw_cards,
    get_legal_actions,
    legal_plays,
    pass_turn,
    play_card,
    start_game,
)
from unoroom.engine.rules import PlayCard

if TYPE_CHECKING:
    from unoroom.agent.protocol import AgentProtocol

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    """Result of a completed game."""

    winner: Optional[str]
    num_turns: int
    player_ids: tuple[str, ...]


class GameRunner:
    """Runs a single UNO game to completion, offline, with no transport."""

    def __init__(
        self,
        agents: dict[str, "AgentProtocol"],
        seed: Optional[int] = None,
        max_turns: int = 1000,
    ):
        self._agents = agents
        self._rng = random.Random(seed)
        self._max_turns = max_turns
        self.last_state: Optional[GameState] = None

    def run(self) -> GameResult:
        """Run the game and return the result."""
        player_ids = list(self._agents.keys())
        seats = [Player(id=pid, name=self._agents[pid].name) for pid in player_ids]
        state = start_game(create_game("offline", seats), rng=self._rng)
        num_turns = 0

        while state.status == GameStatus.PLAYING and num_turns < self._max_turns:
            pid = state.players[state.current_turn_index].id
            state = self._take_turn(state, pid)
            state = self._maybe_challenge(state, pid)
            num_turns += 1

        self.last_state = state
        logger.debug("Game finished after %d turns, winner=%s", num_turns, state.winner_id)
        return GameResult(
            winner=state.winner_id,
            num_turns=num_turns,
            player_ids=tuple(player_ids),
        )

    def _take_turn(self, state: GameState, pid: str) -> GameState:
        agent = self._agents[pid]
        if agent.wants_uno(PlayerView.from_state(state, pid)):
            state = call_uno(state, pid)

        legal = get_legal_actions(state, pid)
        action = agent.get_action(PlayerView.from_state(state, pid), legal, pid)
        if isinstance(action, PlayCard):
            return play_card(state, pid, action.card.id, action.chosen_color, rng=self._rng)

        # Draw one; the drawn card may be played straight away
        state = draw_cards(state, pid, 1, rng=self._rng)
        hand = state.players[state.current_turn_index].hand
        if hand:
            drawn = hand[-1]
            options = [a for a in legal_plays(state, pid) if a.card.id == drawn.id]
            if options:
                choice = agent.get_action(PlayerView.from_state(state, pid), list(options), pid)
                if isinstance(choice, PlayCard):
                    return play_card(state, pid, choice.card.id, choice.chosen_color, rng=self._rng)
        return pass_turn(state, pid)

    def _maybe_challenge(self, state: GameState, pid: str) -> GameState:
        # Whoever is up next catches a player left on one card without UNO
        if state.status != GameStatus.PLAYING:
            return state
        player = state.find_player(pid)
        if player is None or len(player.hand) != 1 or player.is_safe:
            return state
        challenger = state.players[state.current_turn_index].id
        if challenger == pid:
            return state
        state, _ = challenge_uno(state, challenger, pid, rng=self._rng)
        return state
