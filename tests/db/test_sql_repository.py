"""Unit tests for src/db/sql_repository.py"""

from unittest.mock import patch

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.config.models import DatabaseParams
from src.core.exceptions import InvalidRequestError, RepositoryError
from src.core.models import OwnerModel
from src.db.database import create_session_factory, get_db
from src.db.sql_repository import SQLOwnerDirectory, SQLSnapshotRepository


# --- SNAPSHOTS ---
def test_no_snapshot_yet(db_session_repo: Session) -> None:
    repo = SQLSnapshotRepository(db_session_repo)
    assert repo.load_snapshot() is None


def test_save_and_load_snapshot(db_session_repo: Session) -> None:
    repo = SQLSnapshotRepository(db_session_repo)
    repo.save_snapshot('{"pieces": [], "move_count": 0}')
    assert repo.load_snapshot() == '{"pieces": [], "move_count": 0}'


def test_save_replaces_previous_snapshot(db_session_repo: Session) -> None:
    repo = SQLSnapshotRepository(db_session_repo)
    repo.save_snapshot("first")
    repo.save_snapshot("second")
    assert repo.load_snapshot() == "second"

    # a new repository on the same database sees the same row
    assert SQLSnapshotRepository(db_session_repo).load_snapshot() == "second"


def test_named_snapshots_are_independent(db_session_repo: Session) -> None:
    SQLSnapshotRepository(db_session_repo, name="game").save_snapshot("game blob")
    assert SQLSnapshotRepository(db_session_repo, name="backup").load_snapshot() is None


# --- OWNERS ---
def test_register_owner(db_session_repo: Session) -> None:
    directory = SQLOwnerDirectory(db_session_repo)
    registration = directory.register("Mocker", "green")

    assert directory.resolve(registration.session) == registration.owner
    assert directory.get(registration.owner) == OwnerModel(username="Mocker", color="green")


def test_owners_survive_a_new_directory(db_session_repo: Session) -> None:
    first = SQLOwnerDirectory(db_session_repo).register("Mocker", "green")
    second = SQLOwnerDirectory(db_session_repo).register("McMock", "pink")

    directory = SQLOwnerDirectory(db_session_repo)
    assert directory.resolve(first.session) == first.owner
    assert directory.owners() == {
        first.owner: OwnerModel("Mocker", "green"),
        second.owner: OwnerModel("McMock", "pink"),
    }


def test_unknown_session(db_session_repo: Session) -> None:
    directory = SQLOwnerDirectory(db_session_repo)
    assert directory.resolve("unknown") is None
    assert directory.get("unknown") is None
    assert directory.owners() == {}


@pytest.mark.parametrize("username, color", [("abc", "green"), ("Mocker", "white")])
def test_invalid_owner_not_stored(db_session_repo: Session, username: str, color: str) -> None:
    directory = SQLOwnerDirectory(db_session_repo)
    with pytest.raises(InvalidRequestError):
        directory.register(username, color)
    assert directory.owners() == {}


# --- COMMIT FAILURES ---
def test_failed_snapshot_save_is_rolled_back(db_session_repo: Session) -> None:
    repo = SQLSnapshotRepository(db_session_repo)
    with patch.object(db_session_repo, "commit", side_effect=SQLAlchemyError("disk full")):
        with pytest.raises(RepositoryError):
            repo.save_snapshot("blob")

    # the session is usable again, and nothing was stored
    assert repo.load_snapshot() is None
    repo.save_snapshot("blob")
    assert repo.load_snapshot() == "blob"


def test_failed_registration_is_rolled_back(db_session_repo: Session) -> None:
    directory = SQLOwnerDirectory(db_session_repo)
    with patch.object(db_session_repo, "commit", side_effect=SQLAlchemyError("disk full")):
        with pytest.raises(RepositoryError):
            directory.register("Mocker", "green")
    assert directory.owners() == {}


# --- SESSION FACTORY ---
def test_session_factory_creates_tables() -> None:
    factory = create_session_factory(DatabaseParams(url="sqlite:///:memory:"))
    sessions = get_db(factory)
    db = next(sessions)
    try:
        assert {"snapshots", "owners", "sessions"} <= set(inspect(db.get_bind()).get_table_names())
        repo = SQLSnapshotRepository(db)
        repo.save_snapshot("blob")
        assert repo.load_snapshot() == "blob"
    finally:
        sessions.close()
