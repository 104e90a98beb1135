"""
Game lifecycle: which status changes are allowed and what each of them does to the game state.

    scheduled --warm_up--> warmup
    scheduled | warmup --start--> in_progress      (fresh start: inning 1, top, 0 outs, empty line score)
    suspended --start--> in_progress                (resumption: keeps inning and scores)
    in_progress --suspend--> suspended
    in_progress | suspended --end--> final          (final is terminal)
"""

from dataclasses import replace
from datetime import datetime
from typing import Optional

from src.core.exceptions import InvalidTransitionError
from src.core.shared_types import InningHalf, Status
from src.scoring.game_state import GameState

VALID_STATUS_TRANSITIONS: dict[Status, set[Status]] = {
    Status.SCHEDULED: {Status.WARMUP, Status.IN_PROGRESS},
    Status.WARMUP: {Status.IN_PROGRESS},
    Status.IN_PROGRESS: {Status.SUSPENDED, Status.FINAL},
    Status.SUSPENDED: {Status.IN_PROGRESS, Status.FINAL},
    Status.FINAL: set(),
}

# Fields a fresh start resets
START_FIELDS = (
    "status",
    "started_at",
    "current_inning",
    "current_inning_half",
    "outs",
    "home_score",
    "away_score",
    "home_inning_scores",
    "away_inning_scores",
)
RESUME_FIELDS = ("status",)
END_FIELDS = ("status", "ended_at", "notes")


def is_valid_transition(current: Status, new: Status) -> bool:
    return new in VALID_STATUS_TRANSITIONS[current]


def require_transition(state: GameState, new: Status) -> None:
    if not is_valid_transition(state.status, new):
        raise InvalidTransitionError(
            f"Cannot change game status from '{state.status}' to '{new}'."
        )


def require_in_progress(state: GameState, operation: str) -> None:
    """Scoring operations (runs, outs, advancing the inning) only make sense during a live game."""
    if state.status != Status.IN_PROGRESS:
        raise InvalidTransitionError(
            f"Cannot {operation}: game is not in progress. status: {state.status}"
        )


def is_resumption(state: GameState) -> bool:
    return state.status == Status.SUSPENDED


def start_fields(state: GameState) -> tuple[str, ...]:
    """The part of the state a start touches depends on whether it is a fresh start or a resumption."""
    return RESUME_FIELDS if is_resumption(state) else START_FIELDS


def start(state: GameState, now: datetime) -> GameState:
    require_transition(state, Status.IN_PROGRESS)

    if is_resumption(state):
        return replace(state, status=Status.IN_PROGRESS)

    return replace(
        state,
        status=Status.IN_PROGRESS,
        started_at=now,
        current_inning=1,
        current_inning_half=InningHalf.TOP,
        outs=0,
        home_score=0,
        away_score=0,
        home_inning_scores=[],
        away_inning_scores=[],
    )


def warm_up(state: GameState) -> GameState:
    require_transition(state, Status.WARMUP)
    return replace(state, status=Status.WARMUP)


def suspend(state: GameState) -> GameState:
    require_transition(state, Status.SUSPENDED)
    return replace(state, status=Status.SUSPENDED)


def end(state: GameState, now: datetime, notes: Optional[str] = None) -> GameState:
    """Scores, inning and outs stay as they are for the historical record."""
    require_transition(state, Status.FINAL)
    return replace(
        state,
        status=Status.FINAL,
        ended_at=now,
        notes=notes if notes is not None else state.notes,
    )
