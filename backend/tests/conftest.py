import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session

from academics.auth import issue_token
from academics.courses import CourseContext
from academics.database import create_db_and_tables, get_session, make_engine
from academics.main import app


@pytest.fixture()
def engine():
    """A fresh in-memory SQLite database per test."""
    eng = make_engine("sqlite://", poolclass=StaticPool)
    create_db_and_tables(eng)
    yield eng
    SQLModel.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as s:
        yield s


@pytest.fixture()
def ctx(session):
    return CourseContext(session)


@pytest.fixture()
def program(ctx):
    return ctx.create_program({'name': 'Computer Science', 'code': 'CS'}).value


@pytest.fixture()
def client(engine):
    def _session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers():
    return {'Authorization': f'Bearer {issue_token("tester")}'}
