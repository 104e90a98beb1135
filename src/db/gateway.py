"""Async gateway (load / persist) on top of a synchronous GameRepository."""

import asyncio
import logging
import threading
from typing import Any, Callable, TypeVar
from uuid import UUID

from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RepositoryGateway:
    """
    Runs the blocking repository calls in a worker thread so the event loop (and with it the
    optimistic updates of the scoring sessions) never waits on the database.

    A single database session is not safe to use from two threads at once. The lock is taken
    inside the worker thread: a caller that times out or gets cancelled stops waiting, but its
    thread keeps the session until the repository call has returned.
    """

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository
        self._lock = threading.Lock()

    async def load_game(self, game_id: UUID) -> GameModel:
        game_model = await self._run(self.repo.get_game, game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model

    async def persist_game_update(
        self, game_id: UUID, changes: dict[str, Any]
    ) -> GameModel | None:
        updated = await self._run(self.repo.patch_game, game_id, changes)
        if updated is None:
            logger.warning("Update for unknown game %s was dropped", game_id)
        return updated

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        return await asyncio.to_thread(self._locked, func, *args)

    def _locked(self, func: Callable[..., T], *args: Any) -> T:
        with self._lock:
            return func(*args)
