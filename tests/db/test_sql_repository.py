"""Unit tests for src/db/sql_repository.py"""

from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.shared_types import InningHalf, Status
from src.db.sql_repository import GameModel, SQLGameRepository


def test_create_game(db_session_repo: Session, live_game: GameModel) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    repo = SQLGameRepository(db_session_repo)
    record_in_db, _ = repo.create_game(live_game)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == live_game


def test_create_game_with_defaults(
    db_session_repo: Session, scheduled_game: GameModel
) -> None:
    repo = SQLGameRepository(db_session_repo)
    record_in_db, _ = repo.create_game(scheduled_game)
    assert record_in_db.status == "scheduled"
    assert record_in_db.current_inning == 1
    assert record_in_db.current_inning_half == "top"
    assert record_in_db.home_inning_scores == []
    assert record_in_db.started_at is None


def test_get_game_by_id(db_session_repo: Session, live_game: GameModel) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(live_game)
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game
    assert game_found.started_at is not None
    assert game_found.started_at.tzinfo is not None


def test_get_unknown_game(db_session_repo: Session, live_game: GameModel) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    # Now do it with creating a game, but retrieving from the wrong ID
    repo.create_game(live_game)
    assert repo.get_game(uuid4()) is None


# -- PATCH / UPDATE --
def test_patch_game(db_session_repo: Session, live_game: GameModel) -> None:
    """Only the given fields change, everything else stays as stored."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(live_game)

    updated = repo.patch_game(
        game_id, {"home_score": 3, "home_inning_scores": [0, 1, 2]}
    )
    assert updated is not None
    assert updated.home_score == 3
    assert updated.home_inning_scores == [0, 1, 2]
    assert updated.away_score == live_game.away_score
    assert updated.away_inning_scores == live_game.away_inning_scores
    assert repo.get_game(game_id) == updated


def test_patch_game_accepts_enums(db_session_repo: Session, live_game: GameModel) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(live_game)

    updated = repo.patch_game(
        game_id,
        {"status": Status.SUSPENDED, "current_inning_half": InningHalf.TOP},
    )
    assert updated is not None
    assert updated.status == "suspended"
    assert updated.current_inning_half == "top"


def test_patch_same_list_object(db_session_repo: Session, live_game: GameModel) -> None:
    """An in-place change of a stored list must still reach the database."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(live_game)

    scores = repo.get_game(game_id).away_inning_scores  # type: ignore[union-attr]
    scores.append(4)
    repo.patch_game(game_id, {"away_inning_scores": scores})
    db_session_repo.expire_all()
    assert repo.get_game(game_id).away_inning_scores == [2, 0, 1, 4]  # type: ignore[union-attr]


def test_patch_unknown_field(db_session_repo: Session, live_game: GameModel) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(live_game)
    with pytest.raises(RepositoryError):
        repo.patch_game(game_id, {"balls": 2})


def test_patch_unknown_game(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    assert repo.patch_game(uuid4(), {"outs": 2}) is None


def test_update_game(db_session_repo: Session, live_game: GameModel) -> None:
    """Overwrite every field of an existing record."""
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(live_game)

    new_model = GameModel(status="final", home_score=5, home_inning_scores=[5])
    updated = repo.update_game(game_id, new_model)
    assert updated == new_model
    assert repo.get_game(game_id) == new_model


# -- DELETE --
def test_delete_game(db_session_repo: Session, live_game: GameModel) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(live_game)

    deleted = repo.delete_game(game_id)
    assert deleted == live_game
    assert repo.get_game(game_id) is None
    assert repo.delete_game(game_id) is None
