"""Protocols for the persistence side: a synchronous repository (SQLAlchemy / anything else) and the async gateway the scoring session talks to."""

from typing import Any, Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite an existing record."""
        ...

    def patch_game(self, game_id: UUID, changes: dict[str, Any]) -> GameModel | None:
        """Write only the given fields of an existing record, in one go."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...


class GameGateway(Protocol):
    """What a scoring session needs from the outside world."""

    async def load_game(self, game_id: UUID) -> GameModel:
        """Fetch the stored game (initial load / refresh)."""
        ...

    async def persist_game_update(
        self, game_id: UUID, changes: dict[str, Any]
    ) -> GameModel | None:
        """
        Atomic partial update of the stored game. Returns the updated game.
        Raising, or returning None, counts as a failed update.
        """
        ...
