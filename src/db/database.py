"""Generate database session"""

from functools import lru_cache
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core import config
from src.db.schema import Base


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Engine for the configured database, created (with its tables) on first use."""
    engine = create_engine(config.DATABASE_URL, echo=config.SQL_ECHO)

    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return engine


def get_db() -> Generator[Session, None, None]:
    db = sessionmaker(bind=get_engine())()
    try:
        yield db
    finally:
        db.close()
