"""
conftest.py for backend/tests/

Builds an in-memory SQLite copy of the host tables the block reads, seeded
with a small course, two users and a spread of calendar events around a
fixed NOW. The FastAPI app's DB, clock and renderer dependencies are
overridden so API tests are deterministic.

Run from the project root:
    pytest -v
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from upcoming_events.api.dependencies import get_clock, get_db, get_renderer
from upcoming_events.api.main import app
from upcoming_events.db.database import Base
from upcoming_events.db.models import (
    CalendarEvent,
    Course,
    CourseCategory,
    CourseModule,
    User,
    UserEnrolment,
    UserSession,
)
from upcoming_events.services.rendering import Renderer

NOW = 1_700_000_000
DAY = 86400
WWW = "https://lms.example.edu"

STUDENT_ID = 3
COURSE_ID = 10
SID = "abc123"
SESSKEY = "sk12345"
STALE_SID = "stale456"


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------

def _event(id, name, eventtype, timestart, **fields):
    return CalendarEvent(id=id, name=name, eventtype=eventtype, timestart=timestart, **fields)


def seed(db):
    db.add_all([
        CourseCategory(id=1, name="Science", visible=True),
        CourseCategory(id=2, name="Archive", visible=False),
    ])
    db.add_all([
        Course(id=1, fullname="Test Site", shortname="Site"),
        Course(id=COURSE_ID, category=1, fullname="Intro to Computing", shortname="CS101",
               picture="overview.jpg"),
        Course(id=20, category=1, fullname="Advanced Topics", shortname="CS999"),
    ])
    db.add_all([
        CourseModule(id=100, course=COURSE_ID, modname="assign", instance=1, visible=True),
        CourseModule(id=101, course=COURSE_ID, modname="quiz", instance=1, visible=False),
    ])
    db.add_all([
        User(id=2, username="admin", firstname="Admin", lastname="User", picture=1),
        User(id=STUDENT_ID, username="student", firstname="Sam", lastname="Student", picture=0),
    ])
    db.add(UserEnrolment(id=1, userid=STUDENT_ID, courseid=COURSE_ID))
    db.add_all([
        UserSession(id=1, sid=SID, userid=STUDENT_ID, sesskey=SESSKEY, timemodified=NOW - 60),
        UserSession(id=2, sid="guestsid", userid=0, sesskey="guestkey", timemodified=NOW - 60),
        UserSession(id=3, sid=STALE_SID, userid=STUDENT_ID, sesskey="stalekey", timemodified=NOW - 9 * 3600),
    ])
    db.add_all([
        _event(1, "Assignment due", "course", NOW + 3600, courseid=COURSE_ID, course_module_id=100),
        _event(2, "Site open day", "site", NOW + 90000, courseid=1),
        _event(3, "Dentist", "user", NOW + 2 * DAY, userid=STUDENT_ID),
        _event(4, "Hidden quiz", "course", NOW + 3 * DAY, courseid=COURSE_ID, course_module_id=101),
        _event(5, "Someone else's event", "user", NOW + 4 * DAY, userid=2),
        _event(6, "Too far ahead", "course", NOW + 30 * DAY, courseid=COURSE_ID),
        _event(7, "Already started", "course", NOW - 3600, courseid=COURSE_ID),
        _event(8, "Archive meeting", "category", NOW + 5 * DAY, categoryid=2),
        _event(9, "Science fair", "category", NOW + 5 * DAY, categoryid=1),
        _event(10, "Not enrolled", "course", NOW + 6 * DAY, courseid=20),
        _event(11, "Withdrawn", "course", NOW + 7 * DAY, courseid=COURSE_ID, visible=False),
    ])
    db.commit()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    seed(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def renderer():
    return Renderer(www_root=WWW)


@pytest.fixture
def client(db, renderer):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_clock] = lambda: (lambda: NOW)
    app.dependency_overrides[get_renderer] = lambda: renderer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def logged_in(client):
    client.cookies.set("MoodleSession", SID)
    return client
