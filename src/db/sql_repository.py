"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from dataclasses import fields
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.schema import DBGame

logger = logging.getLogger(__name__)

# Columns that mirror GameModel one-to-one
GAME_FIELDS = tuple(f.name for f in fields(GameModel))


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._write_fields(game_db, self._model_values(game))
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        logger.info("Created game %s (status=%s)", new_id, game_db.status)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite an existing record."""
        return self.patch_game(game_id, self._model_values(game))

    def patch_game(self, game_id: UUID, changes: dict[str, Any]) -> GameModel | None:
        """Write only the given fields of an existing record, in a single commit."""
        unknown = set(changes) - set(GAME_FIELDS)
        if unknown:
            raise RepositoryError(f"Cannot update unknown game fields: {sorted(unknown)}")

        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._write_fields(game_db, changes)
        self.db.commit()
        self.db.refresh(game_db)
        logger.debug("Updated game %s: %s", game_id, sorted(changes))
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _write_fields(self, game_db: DBGame, values: dict[str, Any]) -> None:
        for name, value in values.items():
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, list):
                # Assign a fresh list so the JSON column registers the change
                value = list(value)
            setattr(game_db, name, value)

    def _model_values(self, game: GameModel) -> dict[str, Any]:
        return {name: getattr(game, name) for name in GAME_FIELDS}

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            status=game_db.status,
            home_score=game_db.home_score,
            away_score=game_db.away_score,
            current_inning=game_db.current_inning,
            current_inning_half=game_db.current_inning_half,
            outs=game_db.outs,
            home_inning_scores=list(game_db.home_inning_scores),
            away_inning_scores=list(game_db.away_inning_scores),
            started_at=_as_utc(game_db.started_at),
            ended_at=_as_utc(game_db.ended_at),
            notes=game_db.notes,
        )


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes. Everything stored here is UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
