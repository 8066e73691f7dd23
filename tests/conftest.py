"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.chess.board import BoardState
from src.chess.pieces import Piece
from src.core.shared_types import PieceType
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mixed_board() -> BoardState:
    """Small board with an owned piece, a neutral piece, a captured piece, and a non-zero move counter."""
    return BoardState(
        pieces=[
            Piece(0, 7, "owner-a", PieceType.PAWN),
            Piece(3, 3, None, PieceType.KNIGHT),
            Piece(3, 3, "owner-b", PieceType.BISHOP, alive=False),
            Piece(5, 2, "owner-b", PieceType.KING),
        ],
        move_count=7,
    )
