"""Shared fixtures for crud unit tests"""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from componentize.crud.models import SavedComponent


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="component")
def component_fixture(session):
    """A minimal SavedComponent persisted to the session."""
    c = SavedComponent(
        name="HeroBanner",
        code="export default function HeroBanner() { return <h1>Hi</h1>; }",
        section_label="Hero",
        created_at=datetime(2024, 1, 1, 12, 0),
    )
    session.add(c)
    session.flush()
    return c
