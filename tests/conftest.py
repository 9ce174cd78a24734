"""
Fixtures shared by the test packages (pytest picks this file up on its own).

The SQL fixtures run against an in-memory SQLite database built the same way the app builds it.
"""

from typing import Generator

import pytest
from sqlalchemy.orm import Session

from src.db.database import make_engine, make_session_factory
from src.db.memory_repository import InMemoryRoomRepository
from src.db.schema import Base

engine = make_engine("sqlite:///:memory:")


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Session on a fresh schema. Tables are dropped at teardown so repository tests stay independent."""
    db = make_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def memory_repository() -> Generator[InMemoryRoomRepository, None, None]:
    repo = InMemoryRoomRepository()
    yield repo
    repo.clear()
