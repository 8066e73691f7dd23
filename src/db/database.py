"""Generate database sessions"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.config.models import DatabaseParams
from src.db.schema import Base


def create_session_factory(params: DatabaseParams) -> sessionmaker[Session]:
    engine = create_engine(params.url, echo=params.echo)
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
