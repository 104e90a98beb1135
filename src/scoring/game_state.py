"""
The GameState is the domain layer's picture of a game being scored.
It is a working copy of the stored game row: built from a GameModel when a scoring session opens,
updated through the pure scoring components, and encoded back into partial updates for persistence.
"""

from copy import deepcopy
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Optional, Self

from src.core.exceptions import GameStateError
from src.core.models import GameModel
from src.core.shared_types import InningHalf, Status, Team

STANDARD_INNINGS = 9

# Subset of GameState fields (name -> value) touched by an action
StateFragment = dict[str, Any]


def batting_team(half: InningHalf) -> Team:
    """top of the inning: away team bats. bottom: home team bats."""
    return Team.AWAY if half == InningHalf.TOP else Team.HOME


@dataclass
class GameState:
    status: Status
    home_score: int = 0
    away_score: int = 0
    current_inning: int = 1
    current_inning_half: InningHalf = InningHalf.TOP
    outs: int = 0
    home_inning_scores: list[int] = field(default_factory=list)
    away_inning_scores: list[int] = field(default_factory=list)
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    notes: Optional[str] = None

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a GameState from the information the Service layer actually has"""

        # Validation
        status_name = model.status.replace(" ", "_").lower()
        if status_name not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )
        half_name = (model.current_inning_half or InningHalf.TOP).lower()
        if half_name not in {half.value for half in InningHalf}:
            raise GameStateError(
                f"Invalid half-inning: {model.current_inning_half!r}. \nPick one from {','.join(half.value for half in InningHalf)}"
            )

        state = cls(
            status=Status(status_name),
            home_score=model.home_score,
            away_score=model.away_score,
            current_inning=1 if model.current_inning is None else model.current_inning,
            current_inning_half=InningHalf(half_name),
            outs=model.outs or 0,
            home_inning_scores=list(model.home_inning_scores),
            away_inning_scores=list(model.away_inning_scores),
            started_at=model.started_at,
            ended_at=model.ended_at,
            notes=model.notes,
        )
        state._check_invariants()
        return state

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(**self.changes(*self.field_names()))

    @staticmethod
    def field_names() -> tuple[str, ...]:
        return tuple(f.name for f in fields(GameState))

    @property
    def batting_team(self) -> Team:
        return batting_team(self.current_inning_half)

    @property
    def is_extra_innings(self) -> bool:
        return self.current_inning > STANDARD_INNINGS

    def fragment(self, *names: str) -> StateFragment:
        """Snapshot of the named fields. Lists are copied so later updates cannot leak into the snapshot."""
        self._check_field_names(names)
        return {name: deepcopy(getattr(self, name)) for name in names}

    def changes(self, *names: str) -> dict[str, Any]:
        """Same as fragment(), but with enums encoded as plain strings (what the persistence layer stores)."""
        return {
            name: value.value if isinstance(value, (Status, InningHalf)) else value
            for name, value in self.fragment(*names).items()
        }

    def apply(self, fragment: StateFragment) -> Self:
        """New GameState with the fragment's values written over this one."""
        self._check_field_names(fragment.keys())
        return replace(self, **deepcopy(fragment))

    def copy(self) -> Self:
        return deepcopy(self)

    def _check_invariants(self) -> None:
        """Stored rows that break the scoring invariants are rejected on load."""
        if not 0 <= self.outs <= 3:
            raise GameStateError(f"Outs must be between 0 and 3, got {self.outs}.")
        if self.current_inning < 1:
            raise GameStateError(
                f"Inning must be at least 1, got {self.current_inning}."
            )
        for team, score, inning_scores in [
            ("home", self.home_score, self.home_inning_scores),
            ("away", self.away_score, self.away_inning_scores),
        ]:
            if any(runs < 0 for runs in inning_scores):
                raise GameStateError(
                    f"Inning scores cannot be negative ({team}): {inning_scores}."
                )
            if score != sum(inning_scores):
                raise GameStateError(
                    f"{team.capitalize()} score {score} does not match its inning line {inning_scores}."
                )

    def _check_field_names(self, names) -> None:
        unknown = set(names) - set(self.field_names())
        if unknown:
            raise GameStateError(f"Unknown game state fields: {sorted(unknown)}")
