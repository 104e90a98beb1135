"""
The ScoringSession is the single owner of a game's state while a manager scores it.

Every public operation runs the same two-phase protocol:

1. check the operation is allowed for the current status (nothing changes if it is not)
2. snapshot the part of the state the operation is about to touch
3. compute the new state with the pure scoring components
4. apply it locally right away (optimistic update)
5. push the snapshot onto the undo log
6. persist the touched fields through the gateway
7. success: done
8. failure / timeout: put the snapshot back, drop the undo log entry, raise PersistenceFailureError.
   A caller cancelled mid-persist gets the same rollback before the CancelledError propagates.

Operations on one session are serialized: the next operation waits until the previous one's
persistence call has resolved, so it can never be rolled back from under it.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Optional, Self
from uuid import UUID

from src.core.config import Config
from src.core.exceptions import (
    InvalidTransitionError,
    OutOfRangeValueError,
    PersistenceFailureError,
)
from src.core.shared_types import ActionKind, InningHalf, Status
from src.db.repository import GameGateway
from src.scoring import innings, lifecycle
from src.scoring.game_state import GameState, StateFragment, batting_team
from src.scoring.history import ActionHistory
from src.scoring.innings import OutsChange
from src.scoring.runs import apply_runs, finalize_half, replace_inning_scores

logger = logging.getLogger(__name__)

RUN_FIELDS = {
    InningHalf.TOP: ("away_score", "away_inning_scores"),
    InningHalf.BOTTOM: ("home_score", "home_inning_scores"),
}
OUTS_FIELDS = ("outs",)
INNING_FIELDS = (
    "current_inning",
    "current_inning_half",
    "outs",
    "home_inning_scores",
    "away_inning_scores",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ActionResult:
    """What an operation did. `applied` is False only for an undo with nothing to undo."""

    kind: ActionKind
    description: str
    previous: GameState
    state: GameState
    ready_to_advance: bool = False
    applied: bool = True


class ScoringSession:
    """Scoring of one game. Holds the only mutable copy of its GameState."""

    def __init__(
        self,
        game_id: UUID,
        state: GameState,
        gateway: GameGateway,
        persist_timeout: Optional[float] = None,
        clock: Callable[[], datetime] = utc_now,
        history: Optional[ActionHistory] = None,
    ) -> None:
        self.game_id = game_id
        self.gateway = gateway
        self.persist_timeout = (
            Config.PERSIST_TIMEOUT_SEC if persist_timeout is None else persist_timeout
        )
        self.history = history if history is not None else ActionHistory()
        self._state = state
        self._clock = clock
        self._lock = asyncio.Lock()

    @classmethod
    async def open(cls, game_id: UUID, gateway: GameGateway, **kwargs) -> Self:
        """Seed a new session with the stored game."""
        game_model = await gateway.load_game(game_id)
        session = cls(game_id, GameState.from_model(game_model), gateway, **kwargs)
        logger.info(
            "Opened scoring session for game %s (status=%s)",
            game_id,
            session.state.status,
        )
        return session

    @property
    def state(self) -> GameState:
        """Current local state, including any optimistic update still waiting for the server."""
        return self._state

    @property
    def busy(self) -> bool:
        """True while an operation (and its persistence call) is in flight."""
        return self._lock.locked()

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    # --- SCORING ---
    async def record_runs(
        self, runs: int, half: Optional[InningHalf] = None
    ) -> ActionResult:
        """Runs for the team batting in `half` (defaults to the current half-inning)."""
        async with self._lock:
            lifecycle.require_in_progress(self._state, "record runs")
            half = (
                innings.parse_half(half)
                if half is not None
                else self._state.current_inning_half
            )
            new_state = apply_runs(self._state, runs, half)
            description = (
                f"{runs} run{'s' if runs != 1 else ''} for the {batting_team(half)} team"
            )
            return await self._commit(
                ActionKind.RUNS, description, new_state, RUN_FIELDS[half]
            )

    async def change_outs(self, outs: int) -> ActionResult:
        """Set the out count. Reaching three outs only signals `ready_to_advance`."""
        async with self._lock:
            lifecycle.require_in_progress(self._state, "change outs")
            change = innings.set_outs(self._state.outs, outs)
            return await self._commit_outs(change)

    async def record_outs(self, count: int = 1) -> ActionResult:
        async with self._lock:
            lifecycle.require_in_progress(self._state, "record outs")
            change = innings.add_outs(self._state.outs, count)
            return await self._commit_outs(change)

    async def toggle_out(self, out_number: int) -> ActionResult:
        async with self._lock:
            lifecycle.require_in_progress(self._state, "change outs")
            change = innings.toggle_out(self._state.outs, out_number)
            return await self._commit_outs(change)

    async def advance_inning(
        self,
        force_inning: Optional[int] = None,
        force_half: Optional[InningHalf] = None,
    ) -> ActionResult:
        """Move on to the next half-inning, or to a forced inning/half (corrections). Outs go back to 0."""
        if (force_inning is None) != (force_half is None):
            raise OutOfRangeValueError(
                "Both force_inning and force_half must be provided together, or neither."
            )

        async with self._lock:
            lifecycle.require_in_progress(self._state, "advance the inning")
            new_state = self._state
            if force_inning is not None and force_half is not None:
                inning, half = innings.force_half_inning(force_inning, force_half)
            else:
                inning, half = innings.advance_half_inning(
                    self._state.current_inning, self._state.current_inning_half
                )
                new_state = finalize_half(new_state)
            new_state = replace(
                new_state, current_inning=inning, current_inning_half=half, outs=0
            )
            description = f"Advanced to {half.capitalize()} of {inning}"
            return await self._commit(
                ActionKind.ADVANCE, description, new_state, INNING_FIELDS
            )

    async def correct_state(
        self,
        current_inning: Optional[int] = None,
        current_inning_half: Optional[InningHalf] = None,
        outs: Optional[int] = None,
        home_inning_scores: Optional[list[int]] = None,
        away_inning_scores: Optional[list[int]] = None,
    ) -> ActionResult:
        """Admin correction of inning, outs and line scores. Totals follow the corrected lines."""
        async with self._lock:
            if self._state.status == Status.FINAL:
                raise InvalidTransitionError("Cannot correct a game that is final.")

            new_state = replace_inning_scores(
                self._state, home=home_inning_scores, away=away_inning_scores
            )
            if current_inning is not None or current_inning_half is not None:
                inning, half = innings.force_half_inning(
                    new_state.current_inning if current_inning is None else current_inning,
                    new_state.current_inning_half
                    if current_inning_half is None
                    else current_inning_half,
                )
                new_state = replace(
                    new_state, current_inning=inning, current_inning_half=half
                )
            if outs is not None:
                new_state = replace(
                    new_state, outs=innings.set_outs(new_state.outs, outs).outs
                )

            changed = tuple(
                name
                for name in GameState.field_names()
                if getattr(new_state, name) != getattr(self._state, name)
            )
            return await self._commit(
                ActionKind.CORRECTION, "Game state corrected", new_state, changed
            )

    # --- LIFECYCLE ---
    async def start_game(self) -> ActionResult:
        async with self._lock:
            fields = lifecycle.start_fields(self._state)
            resuming = lifecycle.is_resumption(self._state)
            new_state = lifecycle.start(self._state, self._clock())
            description = "Game resumed" if resuming else "Game started"
            result = await self._commit(ActionKind.START, description, new_state, fields)
            logger.info("%s: game %s", description, self.game_id)
            return result

    async def warm_up(self) -> ActionResult:
        async with self._lock:
            new_state = lifecycle.warm_up(self._state)
            return await self._commit(
                ActionKind.WARMUP, "Warmup started", new_state, ("status",)
            )

    async def suspend_game(self) -> ActionResult:
        async with self._lock:
            new_state = lifecycle.suspend(self._state)
            result = await self._commit(
                ActionKind.SUSPEND, "Game suspended", new_state, ("status",)
            )
            logger.info("Game %s suspended", self.game_id)
            return result

    async def end_game(self, notes: Optional[str] = None) -> ActionResult:
        async with self._lock:
            new_state = lifecycle.end(self._state, self._clock(), notes)
            result = await self._commit(
                ActionKind.END, "Game ended", new_state, lifecycle.END_FIELDS
            )
            logger.info(
                "Game %s final: away %d - home %d",
                self.game_id,
                new_state.away_score,
                new_state.home_score,
            )
            return result

    # --- UNDO ---
    async def undo_last_action(self) -> ActionResult:
        """
        Revert the newest action in the undo log, and persist the reverted state like any other action.
        ----

        Nothing to undo is not an error: the result comes back with applied=False.
        If persisting the undo fails, the action is re-applied locally and stays undoable.
        """
        async with self._lock:
            entry = self.history.pop()
            if entry is None:
                return ActionResult(
                    ActionKind.UNDO,
                    "Nothing to undo",
                    self._state,
                    self._state,
                    applied=False,
                )

            previous = self._state
            redo_fragment = previous.fragment(*entry.prior_fragment)
            self._state = previous.apply(entry.prior_fragment)
            try:
                await self._persist(self._state.changes(*entry.prior_fragment))
            except (PersistenceFailureError, asyncio.CancelledError):
                self._state = self._state.apply(redo_fragment)
                self.history.restore(entry)
                logger.warning(
                    "Rolled back undo of %r for game %s", entry.description, self.game_id
                )
                raise
            return ActionResult(
                ActionKind.UNDO, f"Undid: {entry.description}", previous, self._state
            )

    async def refresh(self) -> GameState:
        """Replace the working copy with the stored game. The undo log is cleared: its snapshots no longer line up."""
        async with self._lock:
            game_model = await self.gateway.load_game(self.game_id)
            self._state = GameState.from_model(game_model)
            self.history.clear()
            return self._state

    # --- PRIVATE HELPERS ---
    async def _commit_outs(self, change: OutsChange) -> ActionResult:
        new_state = replace(self._state, outs=change.outs)
        return await self._commit(
            ActionKind.OUTS,
            f"Outs: {self._state.outs} -> {change.outs}",
            new_state,
            OUTS_FIELDS,
            ready_to_advance=change.ready_to_advance,
        )

    async def _commit(
        self,
        kind: ActionKind,
        description: str,
        new_state: GameState,
        fields: tuple[str, ...],
        ready_to_advance: bool = False,
    ) -> ActionResult:
        """Optimistic apply + undo log entry, then persist. Must be called while holding the lock."""
        previous = self._state
        prior_fragment: StateFragment = previous.fragment(*fields)

        self._state = new_state
        evicted = self.history.record(kind, description, prior_fragment, self._clock())

        try:
            await self._persist(new_state.changes(*fields))
        except (PersistenceFailureError, asyncio.CancelledError):
            self._state = self._state.apply(prior_fragment)
            self.history.discard_last(restore=evicted)
            logger.warning(
                "Rolled back %r for game %s", description, self.game_id
            )
            raise

        return ActionResult(
            kind, description, previous, self._state, ready_to_advance=ready_to_advance
        )

    async def _persist(self, changes: dict) -> None:
        try:
            updated = await asyncio.wait_for(
                self.gateway.persist_game_update(self.game_id, changes),
                timeout=self.persist_timeout,
            )
        except TimeoutError as exc:
            raise PersistenceFailureError(
                f"timed out after {self.persist_timeout}s"
            ) from exc
        except Exception as exc:
            raise PersistenceFailureError(str(exc) or type(exc).__name__) from exc

        if updated is None:
            raise PersistenceFailureError(f"game {self.game_id} not found")
        logger.debug("Persisted %s for game %s", sorted(changes), self.game_id)
