"""
Custom exceptions shared by all layers.

Every error is scoped to a single operation; none of them is fatal to the process.
"""


class ScoringError(Exception):
    """Top-level exception for anything going wrong while scoring a game."""


class InvalidTransitionError(ScoringError):
    """Operation attempted while the game's status forbids it (e.g. scoring a final game)."""


class PersistenceFailureError(ScoringError):
    """Persisting an update failed or timed out. The local state has already been rolled back."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to persist game update: {reason}")
        self.reason = reason


class OutOfRangeValueError(ScoringError, ValueError):
    """Value outside its documented bounds (outs, runs, inning). Nothing was applied."""


class GameStateError(ScoringError):
    """Stored game data cannot be interpreted (unknown status, unknown half-inning, ...)."""


class RepositoryError(ScoringError):
    """Game record could not be found or written."""


class InvalidRequestError(ScoringError):
    """Request did not pass validation."""
