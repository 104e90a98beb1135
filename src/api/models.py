"""Requests and Response models"""

from datetime import datetime
from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, field_validator, model_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import ActionKind, InningHalf, Status

# Sanity limit at the request boundary. The scoring domain itself has no upper cap.
MAX_RUNS_PER_HALF_INNING = 99
MAX_OUTS = 3
MAX_NOTES_LENGTH = 500


# --- REQUEST MODELS ---
class GameRequest(BaseModel):
    game_id: UUID


class RecordRunsRequest(BaseModel):
    game_id: UUID
    runs: int
    half: Optional[InningHalf] = None

    @field_validator("runs")
    @classmethod
    def validate_runs(cls, value: int) -> int:
        if not 0 <= value <= MAX_RUNS_PER_HALF_INNING:
            raise InvalidRequestError(
                f"Runs must be between 0 and {MAX_RUNS_PER_HALF_INNING}, got {value}."
            )
        return value


class ChangeOutsRequest(BaseModel):
    game_id: UUID
    outs: int

    @field_validator("outs")
    @classmethod
    def validate_outs(cls, value: int) -> int:
        if not 0 <= value <= MAX_OUTS:
            raise InvalidRequestError(f"Outs must be between 0 and {MAX_OUTS}, got {value}.")
        return value


class RecordOutsRequest(BaseModel):
    """Several outs on one play (double play, triple play)."""

    game_id: UUID
    count: int = 1

    @field_validator("count")
    @classmethod
    def validate_count(cls, value: int) -> int:
        if not 1 <= value <= MAX_OUTS:
            raise InvalidRequestError(
                f"Must record between 1 and {MAX_OUTS} outs at once, got {value}."
            )
        return value


class ToggleOutRequest(BaseModel):
    """Tap on one of the three out indicators."""

    game_id: UUID
    out_number: int

    @field_validator("out_number")
    @classmethod
    def validate_out_number(cls, value: int) -> int:
        if not 1 <= value <= MAX_OUTS:
            raise InvalidRequestError(
                f"Out number must be between 1 and {MAX_OUTS}, got {value}."
            )
        return value


class AdvanceInningRequest(BaseModel):
    game_id: UUID
    force_inning: Optional[int] = None
    force_half: Optional[InningHalf] = None

    @field_validator("force_inning")
    @classmethod
    def validate_inning(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise InvalidRequestError(f"Inning must be at least 1, got {value}.")
        return value

    @model_validator(mode="after")
    def validate_force_pair(self) -> Self:
        if (self.force_inning is None) != (self.force_half is None):
            raise InvalidRequestError(
                "Both force_inning and force_half must be provided together, or neither."
            )
        return self


class StartGameRequest(BaseModel):
    game_id: UUID
    status: Status = Status.IN_PROGRESS

    @field_validator("status")
    @classmethod
    def validate_status(cls, value: Status) -> Status:
        if value not in (Status.WARMUP, Status.IN_PROGRESS):
            raise InvalidRequestError(
                f"A game can only be started into warmup or in_progress, not {value}."
            )
        return value


class EndGameRequest(BaseModel):
    game_id: UUID
    notes: Optional[str] = None

    @field_validator("notes")
    @classmethod
    def validate_notes(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) > MAX_NOTES_LENGTH:
            raise InvalidRequestError(
                f"Notes cannot exceed {MAX_NOTES_LENGTH} characters."
            )
        return value


class CorrectStateRequest(BaseModel):
    """Admin correction. Scores are derived from the inning lines, never set directly."""

    game_id: UUID
    current_inning: Optional[int] = None
    current_inning_half: Optional[InningHalf] = None
    outs: Optional[int] = None
    home_inning_scores: Optional[list[int]] = None
    away_inning_scores: Optional[list[int]] = None

    @field_validator("current_inning")
    @classmethod
    def validate_inning(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise InvalidRequestError(f"Inning must be at least 1, got {value}.")
        return value

    @field_validator("outs")
    @classmethod
    def validate_outs(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and not 0 <= value <= MAX_OUTS:
            raise InvalidRequestError(f"Outs must be between 0 and {MAX_OUTS}, got {value}.")
        return value

    @field_validator(*["home_inning_scores", "away_inning_scores"])
    @classmethod
    def validate_inning_scores(cls, value: Optional[list[int]]) -> Optional[list[int]]:
        if value is not None and any(runs < 0 for runs in value):
            raise InvalidRequestError(f"Inning scores cannot be negative: {value}.")
        return value


# --- RESPONSE MODELS ---
class GameStateResponse(BaseModel):
    game_id: UUID
    status: Status
    home_score: int
    away_score: int
    current_inning: int
    current_inning_half: InningHalf
    outs: int
    home_inning_scores: list[int]
    away_inning_scores: list[int]
    is_extra_innings: bool
    started_at: Optional[datetime]
    ended_at: Optional[datetime]
    notes: Optional[str]


class ScoringActionResponse(BaseModel):
    game_id: UUID
    action: ActionKind
    description: str
    previous_state: GameStateResponse
    new_state: GameStateResponse
    ready_to_advance: bool
    applied: bool
    can_undo: bool
