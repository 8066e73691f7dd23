"""Implementations of the SnapshotRepository and the OwnerDirectory using SQLAlchemy"""

import logging
from typing import Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.exceptions import RepositoryError
from src.core.models import OwnerId, OwnerModel, Registration, SessionToken
from src.db.schema import DBOwner, DBSession, DBSnapshot
from src.owners.directory import validate_color, validate_username

logger = logging.getLogger(__name__)

GAME_SNAPSHOT = "game"


def commit_or_rollback(db: Session, action: str) -> None:
    """Commit the pending changes. On failure the session is rolled back so it stays usable."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise RepositoryError(f"Failed to {action}: {e}") from e


class SQLSnapshotRepository:
    """Board snapshot stored as JSON text in a single row"""

    def __init__(self, db_session: Session, name: str = GAME_SNAPSHOT) -> None:
        self.db = db_session
        self.name = name

    def load_snapshot(self) -> str | None:
        snapshot_db = self.db.get(DBSnapshot, self.name)
        if snapshot_db:
            return snapshot_db.blob
        return None

    def save_snapshot(self, blob: str) -> None:
        snapshot_db = self.db.get(DBSnapshot, self.name)
        if snapshot_db is None:
            self.db.add(DBSnapshot(name=self.name, blob=blob))
        else:
            snapshot_db.blob = blob
        commit_or_rollback(self.db, f"save snapshot {self.name!r}")


class SQLOwnerDirectory:
    """Owners and their session tokens stored in the `owners` / `sessions` tables"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def register(self, username: str, color: str) -> Registration:
        owner_color = validate_color(color)
        validate_username(username)

        owner_id = str(uuid4())
        session = str(uuid4())
        self.db.add(DBOwner(id=owner_id, username=username, color=owner_color.value))
        self.db.add(DBSession(token=session, owner_id=owner_id))
        commit_or_rollback(self.db, f"register owner {username!r}")
        logger.info("Registered owner=%s (username=%s, color=%s)", owner_id, username, owner_color)
        return Registration(session=session, owner=owner_id)

    def resolve(self, session: SessionToken) -> Optional[OwnerId]:
        query = select(DBSession.owner_id).where(DBSession.token == session)
        return self.db.scalar(query)

    def get(self, owner: OwnerId) -> Optional[OwnerModel]:
        owner_db = self.db.get(DBOwner, owner)
        if owner_db:
            return self._to_model(owner_db)
        return None

    def owners(self) -> dict[OwnerId, OwnerModel]:
        query = select(DBOwner).order_by(DBOwner.created_at)
        return {owner_db.id: self._to_model(owner_db) for owner_db in self.db.scalars(query)}

    def _to_model(self, owner_db: DBOwner) -> OwnerModel:
        """Convert SQLAlchemy model to data transfer model."""
        return OwnerModel(username=owner_db.username, color=owner_db.color)
