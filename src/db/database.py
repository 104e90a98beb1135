"""Generate database sessions"""

from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import Config
from src.db.schema import Base


def create_session_factory(
    database_url: Optional[str] = None, echo: Optional[bool] = None
) -> sessionmaker[Session]:
    """Engine + session factory for the configured database. Ensures all tables are created."""
    engine = create_engine(
        database_url or Config.DATABASE_URL,
        echo=Config.DATABASE_ECHO if echo is None else echo,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
