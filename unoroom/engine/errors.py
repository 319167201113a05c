"""Rejected-action errors and the result type callers branch on."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from unoroom.engine.game_state import GameState


class ErrorKind(str, Enum):
    PRECONDITION = "precondition"  # wrong stage, not enough players, room full
    TURN = "turn"  # not the acting player's turn
    POSSESSION = "possession"  # card not in hand
    LEGALITY = "legality"  # card does not match, or wild without a color
    LOOKUP = "lookup"  # unknown player


class GameError(ValueError):
    """Base class for actions the engine refuses. Never fatal."""

    kind: ErrorKind = ErrorKind.PRECONDITION


class PreconditionError(GameError):
    kind = ErrorKind.PRECONDITION


class TurnError(GameError):
    kind = ErrorKind.TURN


class PossessionError(GameError):
    kind = ErrorKind.POSSESSION


class LegalityError(GameError):
    kind = ErrorKind.LEGALITY


class LookupFailure(GameError):
    kind = ErrorKind.LOOKUP


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one engine call.

    On failure ``state`` is the untouched input state.
    ``value`` carries an operation's extra return (e.g. challenge success).
    """

    ok: bool
    state: GameState
    error_kind: Optional[ErrorKind] = None
    message: str = ""
    value: Any = None


def attempt(operation: Callable[..., Any], state: GameState, *args: Any, **kwargs: Any) -> ActionResult:
    """Run ``operation(state, *args, **kwargs)`` and wrap the outcome.

    Operations return either a new GameState or a ``(GameState, value)`` pair.
    """
    try:
        outcome = operation(state, *args, **kwargs)
    except GameError as e:
        return ActionResult(ok=False, state=state, error_kind=e.kind, message=str(e))
    if isinstance(outcome, tuple):
        new_state, value = outcome
        return ActionResult(ok=True, state=new_state, value=value)
    return ActionResult(ok=True, state=outcome)
