"""Recording runs. The aggregate score and the inning-by-inning line always move together."""

from dataclasses import replace
from typing import Optional

from src.core.exceptions import OutOfRangeValueError
from src.core.shared_types import InningHalf, Team
from src.scoring.game_state import GameState, batting_team
from src.scoring.innings import parse_half


def total_runs(inning_scores: list[int]) -> int:
    return sum(inning_scores)


def apply_runs(state: GameState, runs: int, half: InningHalf) -> GameState:
    """
    Add runs for the team batting in the given half, in the current inning.
    ----

    * Zero runs is a legal entry: it still materializes the inning's cell ("no runs this half").
    * The inning line is zero-extended when the current inning has no cell yet.
    * There is no upper limit here. What counts as a reasonable number is up to the caller.
    """
    _check_runs(runs)
    index = state.current_inning - 1

    if batting_team(parse_half(half)) == Team.AWAY:
        return replace(
            state,
            away_score=state.away_score + runs,
            away_inning_scores=_add_to_inning(state.away_inning_scores, index, runs),
        )
    return replace(
        state,
        home_score=state.home_score + runs,
        home_inning_scores=_add_to_inning(state.home_inning_scores, index, runs),
    )


def finalize_half(state: GameState) -> GameState:
    """
    Close the current half-inning: the batting team's cell for this inning exists afterwards,
    even when nothing was scored. Inning lines only ever grow.
    """
    index = state.current_inning - 1
    if batting_team(state.current_inning_half) == Team.AWAY:
        return replace(
            state, away_inning_scores=_add_to_inning(state.away_inning_scores, index, 0)
        )
    return replace(
        state, home_inning_scores=_add_to_inning(state.home_inning_scores, index, 0)
    )


def replace_inning_scores(
    state: GameState,
    home: Optional[list[int]] = None,
    away: Optional[list[int]] = None,
) -> GameState:
    """Overwrite whole inning lines (admin correction). Totals are recomputed from the new lines."""
    new_state = state
    if home is not None:
        _check_inning_scores(home)
        new_state = replace(
            new_state, home_inning_scores=list(home), home_score=total_runs(home)
        )
    if away is not None:
        _check_inning_scores(away)
        new_state = replace(
            new_state, away_inning_scores=list(away), away_score=total_runs(away)
        )
    return new_state


def _add_to_inning(inning_scores: list[int], index: int, runs: int) -> list[int]:
    scores = list(inning_scores)
    while len(scores) <= index:
        scores.append(0)
    scores[index] += runs
    return scores


def _check_runs(runs: int) -> None:
    if isinstance(runs, bool) or not isinstance(runs, int):
        raise OutOfRangeValueError(f"Runs must be a whole number, got {runs!r}.")
    if runs < 0:
        raise OutOfRangeValueError(f"Runs cannot be negative, got {runs}.")


def _check_inning_scores(inning_scores: list[int]) -> None:
    for runs in inning_scores:
        _check_runs(runs)
