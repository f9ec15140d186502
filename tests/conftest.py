"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator, Optional

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.board.engine import PythonChessEngine
from src.board.session import GameSession, InteractionStateMachine
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
        Base.metadata.drop_all(bind=engine)
        db.close()


@pytest.fixture
def new_session() -> Callable[[Optional[str]], GameSession]:
    """Call the inner function with a FEN to start from a custom position (standard starting position otherwise)."""

    def _create_session(fen: Optional[str] = None) -> GameSession:
        return GameSession.start(PythonChessEngine(), fen)

    return _create_session


@pytest.fixture
def new_machine(
    new_session: Callable[[Optional[str]], GameSession],
) -> Callable[[Optional[str]], InteractionStateMachine]:
    """Same as new_session, but wrapped in the interaction state machine."""

    def _create_machine(fen: Optional[str] = None) -> InteractionStateMachine:
        return InteractionStateMachine(new_session(fen))

    return _create_machine
