"""Unit tests for src/db/gateway.py (on top of the SQL repository)"""

import asyncio
import threading
import time
from dataclasses import replace
from typing import Any
from uuid import UUID, uuid4

import pytest
from sqlalchemy.orm import Session

from src.core.exceptions import PersistenceFailureError, RepositoryError
from src.core.models import GameModel
from src.db.gateway import RepositoryGateway
from src.db.sql_repository import SQLGameRepository
from src.services.scoring_session import ScoringSession


def test_load_game(db_session_repo: Session, live_game: GameModel) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(live_game)
    gateway = RepositoryGateway(repo)

    assert asyncio.run(gateway.load_game(game_id)) == live_game


def test_load_unknown_game(db_session_repo: Session) -> None:
    gateway = RepositoryGateway(SQLGameRepository(db_session_repo))
    with pytest.raises(RepositoryError):
        asyncio.run(gateway.load_game(uuid4()))


def test_persist_game_update(db_session_repo: Session, live_game: GameModel) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(live_game)
    gateway = RepositoryGateway(repo)

    updated = asyncio.run(gateway.persist_game_update(game_id, {"outs": 2}))
    assert updated is not None
    assert updated.outs == 2
    assert repo.get_game(game_id).outs == 2  # type: ignore[union-attr]


def test_persist_unknown_game(db_session_repo: Session) -> None:
    gateway = RepositoryGateway(SQLGameRepository(db_session_repo))
    assert asyncio.run(gateway.persist_game_update(uuid4(), {"outs": 2})) is None


def test_scoring_session_on_database(
    db_session_repo: Session, scheduled_game: GameModel
) -> None:
    """Every confirmed action is in the database, an undone one is not."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(scheduled_game)
    gateway = RepositoryGateway(repo)

    async def scenario() -> None:
        session = await ScoringSession.open(game_id, gateway)
        await session.start_game()
        await session.record_runs(2)
        await session.record_outs(3)
        await session.advance_inning()
        await session.record_runs(1)
        await session.undo_last_action()

    asyncio.run(scenario())
    stored = repo.get_game(game_id)
    assert stored is not None
    assert stored.status == "in_progress"
    assert stored.started_at is not None
    assert stored.away_score == 2
    assert stored.away_inning_scores == [2]
    assert stored.home_score == 0
    assert stored.home_inning_scores == []
    assert stored.current_inning == 1
    assert stored.current_inning_half == "bottom"
    assert stored.outs == 0


class SlowRepository:
    """Repository whose writes take longer than the session is willing to wait."""

    def __init__(self, game: GameModel, delay: float) -> None:
        self.game = game
        self.delay = delay
        self.active = 0
        self.max_active = 0
        self._count_lock = threading.Lock()

    def get_game(self, game_id: UUID) -> GameModel | None:
        return replace(self.game)

    def patch_game(self, game_id: UUID, changes: dict[str, Any]) -> GameModel | None:
        with self._count_lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        time.sleep(self.delay)
        self.game = replace(self.game, **changes)
        with self._count_lock:
            self.active -= 1
        return self.game


def test_timed_out_write_still_holds_the_repository(live_game: GameModel) -> None:
    """The next write waits for the abandoned one instead of running next to it."""
    repo = SlowRepository(live_game, delay=0.3)
    gateway = RepositoryGateway(repo)  # type: ignore[arg-type]

    async def scenario() -> None:
        session = await ScoringSession.open(uuid4(), gateway, persist_timeout=0.05)
        for _ in range(2):
            with pytest.raises(PersistenceFailureError):
                await session.record_runs(1)
        assert not session.can_undo

    # asyncio.run waits for the worker threads before returning
    asyncio.run(scenario())
    assert repo.max_active == 1
    assert repo.active == 0
