"""Game orchestration."""

from unoroom.orchestration.game_runner import GameResult, GameRunner
from unoroom.orchestration.tournament import run_tournament

__all__ = ["GameResult", "GameRunner", "run_tournament"]
