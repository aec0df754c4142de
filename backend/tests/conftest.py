import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import classgrid.models  # noqa: F401
from classgrid.api.deps import get_db
from classgrid.db.base import Base
from classgrid.main import app
from classgrid.models.faculty import Faculty
from classgrid.models.subject import Subject

SCHEDULE_TEXT = """\
AIML-A 5th Semester,09:00-09:50,09:50-10:40,10:40-11:30,11:30-12:20,12:20-13:10
Monday,AIML351,AIML353 (G1) / AIML351 (G2),LUNCH,AIML305,
Teacher,VIPSF105,Alice/Bob,,Carol,
Room,301,Lab1/Lab2,,302,
Tuesday,AIML305 (G2),LIB,MENTORSHIP,AIML351 (G2) / AIML353 (G1),SEMINAR
Teacher,Carol,,VIPSF105,Bob/Alice,
Room,Lab3,,301,Lab2/Lab1,Hall
"""


@pytest.fixture()
def schedule_text() -> str:
    return SCHEDULE_TEXT


@pytest.fixture()
def engine():
    # Shared in-memory SQLite so the app and the test see the same tables.
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def roster(db_session):
    db_session.add_all(
        [
            Faculty(id="f-vips105", faculty_code="VIPSF105", name="Vikram Singh", email="vikram@example.com"),
            Faculty(id="f-alice", faculty_code="VIPSF201", name="Alice", email="alice@example.com"),
            Faculty(id="f-bob", faculty_code="VIPSF202", name="Bob", email="bob@example.com"),
            Subject(code="AIML351", name="Machine Learning", credits=4),
            Subject(code="AIML353", name="Deep Learning", credits=3),
        ]
    )
    db_session.commit()
