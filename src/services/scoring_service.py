"""Orchestration of communication from API router to the scoring sessions and persistence layer (and the reverse direction)."""

import logging
from typing import Any
from uuid import UUID

from src.api.models import (
    AdvanceInningRequest,
    ChangeOutsRequest,
    CorrectStateRequest,
    EndGameRequest,
    GameRequest,
    GameStateResponse,
    RecordOutsRequest,
    RecordRunsRequest,
    ScoringActionResponse,
    StartGameRequest,
    ToggleOutRequest,
)
from src.core.shared_types import Status
from src.db.repository import GameGateway
from src.scoring.game_state import GameState
from src.services.scoring_session import ActionResult, ScoringSession

logger = logging.getLogger(__name__)


class ScoringService:
    """One ScoringSession per game. Sessions are opened on first use and reused afterwards."""

    def __init__(self, gateway: GameGateway, **session_options: Any) -> None:
        self.gateway = gateway
        self._session_options = session_options
        self._sessions: dict[UUID, ScoringSession] = {}

    # -- API routes logic ---
    async def open_session(self, request: GameRequest) -> GameStateResponse:
        """Manager opens the scoring view of a game."""
        session = await self._session(request.game_id)
        return self._create_state_response(request.game_id, session.state)

    def close_session(self, request: GameRequest) -> None:
        """Scoring view closed: the working copy (and its undo log) is discarded."""
        if self._sessions.pop(request.game_id, None) is not None:
            logger.info("Closed scoring session for game %s", request.game_id)

    async def get_game_state(self, request: GameRequest) -> GameStateResponse:
        """
        Retrieve current game state.
        ----
        The open session's working copy if there is one, the stored game otherwise.
        """
        session = self._sessions.get(request.game_id)
        if session is not None:
            return self._create_state_response(request.game_id, session.state)
        game_model = await self.gateway.load_game(request.game_id)
        return self._create_state_response(
            request.game_id, GameState.from_model(game_model)
        )

    async def record_runs(self, request: RecordRunsRequest) -> ScoringActionResponse:
        session = await self._session(request.game_id)
        result = await session.record_runs(request.runs, request.half)
        return self._create_action_response(session, result)

    async def change_outs(self, request: ChangeOutsRequest) -> ScoringActionResponse:
        session = await self._session(request.game_id)
        result = await session.change_outs(request.outs)
        return self._create_action_response(session, result)

    async def record_outs(self, request: RecordOutsRequest) -> ScoringActionResponse:
        session = await self._session(request.game_id)
        result = await session.record_outs(request.count)
        return self._create_action_response(session, result)

    async def toggle_out(self, request: ToggleOutRequest) -> ScoringActionResponse:
        session = await self._session(request.game_id)
        result = await session.toggle_out(request.out_number)
        return self._create_action_response(session, result)

    async def advance_inning(
        self, request: AdvanceInningRequest
    ) -> ScoringActionResponse:
        session = await self._session(request.game_id)
        result = await session.advance_inning(request.force_inning, request.force_half)
        return self._create_action_response(session, result)

    async def start_game(self, request: StartGameRequest) -> ScoringActionResponse:
        session = await self._session(request.game_id)
        if request.status == Status.WARMUP:
            result = await session.warm_up()
        else:
            result = await session.start_game()
        return self._create_action_response(session, result)

    async def suspend_game(self, request: GameRequest) -> ScoringActionResponse:
        session = await self._session(request.game_id)
        result = await session.suspend_game()
        return self._create_action_response(session, result)

    async def end_game(self, request: EndGameRequest) -> ScoringActionResponse:
        session = await self._session(request.game_id)
        result = await session.end_game(request.notes)
        return self._create_action_response(session, result)

    async def correct_state(
        self, request: CorrectStateRequest
    ) -> ScoringActionResponse:
        session = await self._session(request.game_id)
        result = await session.correct_state(
            current_inning=request.current_inning,
            current_inning_half=request.current_inning_half,
            outs=request.outs,
            home_inning_scores=request.home_inning_scores,
            away_inning_scores=request.away_inning_scores,
        )
        return self._create_action_response(session, result)

    async def undo_last_action(self, request: GameRequest) -> ScoringActionResponse:
        session = await self._session(request.game_id)
        result = await session.undo_last_action()
        return self._create_action_response(session, result)

    async def refresh_game(self, request: GameRequest) -> GameStateResponse:
        """Reload the open session from the store. Its undo log is discarded."""
        session = await self._session(request.game_id)
        state = await session.refresh()
        return self._create_state_response(request.game_id, state)

    # -- Internal helpers --
    async def _session(self, game_id: UUID) -> ScoringSession:
        """Existing session for the game, or a new one seeded from the stored game."""
        session = self._sessions.get(game_id)
        if session is None:
            session = await ScoringSession.open(
                game_id, self.gateway, **self._session_options
            )
            # Another request may have opened the same game while this one was loading
            session = self._sessions.setdefault(game_id, session)
        return session

    def _create_state_response(
        self, game_id: UUID, state: GameState
    ) -> GameStateResponse:
        """Convert a GameState into a GameStateResponse (for game with given ID.)"""
        return GameStateResponse(
            game_id=game_id,
            status=state.status,
            home_score=state.home_score,
            away_score=state.away_score,
            current_inning=state.current_inning,
            current_inning_half=state.current_inning_half,
            outs=state.outs,
            home_inning_scores=list(state.home_inning_scores),
            away_inning_scores=list(state.away_inning_scores),
            is_extra_innings=state.is_extra_innings,
            started_at=state.started_at,
            ended_at=state.ended_at,
            notes=state.notes,
        )

    def _create_action_response(
        self, session: ScoringSession, result: ActionResult
    ) -> ScoringActionResponse:
        return ScoringActionResponse(
            game_id=session.game_id,
            action=result.kind,
            description=result.description,
            previous_state=self._create_state_response(session.game_id, result.previous),
            new_state=self._create_state_response(session.game_id, result.state),
            ready_to_advance=result.ready_to_advance,
            applied=result.applied,
            can_undo=session.can_undo,
        )
