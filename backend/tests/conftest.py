"""
Test fixtures shared across all tests.

Architecture:
- Tests run against a throwaway SQLite file (aiosqlite), configured through
  the same DATABASE_URL setting the app reads in production. The variables
  are set before anything from reportcard is imported, because the engine
  is created at import time.
- Every async test runs on the session event loop (see
  pytest_collection_modifyitems below).
- Tables are dropped and recreated for every test, so ranking tests see
  only the students they seed.
- Seed data is committed via the app's own AsyncSessionLocal; the HTTP
  test client uses the real FastAPI app with its own sessions.
- The clock dependency is pinned to FIXED_TODAY so term dates (and PDF
  bytes) are reproducible.
"""

import os
import tempfile
import uuid
from datetime import date

_TEST_DB = os.path.join(tempfile.gettempdir(), f"reportcard_test_{os.getpid()}.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB}"
os.environ["DEBUG"] = "false"
os.environ["PDF_BACKEND"] = "reportlab"
os.environ["MAX_COMPONENT_SCORE"] = "50"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from pytest_asyncio import is_async_test  # noqa: E402

from reportcard.database import AsyncSessionLocal, Base, engine  # noqa: E402
from reportcard.main import app  # noqa: E402
from reportcard.models import (  # noqa: E402
    Attendance,
    Score,
    Student,
    Subject,
    TeacherComment,
)
from reportcard.routers.reports import get_today  # noqa: E402
from reportcard.schemas.reports import (  # noqa: E402
    AttendanceInfo,
    ReportRecord,
    ReportStudent,
    ScoreLine,
)
from reportcard.services.report_layout import SchoolInfo  # noqa: E402

FIXED_TODAY = date(2026, 10, 19)


def pytest_collection_modifyitems(items):
    """Run every async test on the session-scoped event loop."""
    session_loop = pytest.mark.asyncio(loop_scope="session")
    for item in items:
        if is_async_test(item):
            item.add_marker(session_loop, append=False)


def pytest_sessionfinish(session, exitstatus):
    if os.path.exists(_TEST_DB):
        os.remove(_TEST_DB)


# --- Plain data fixtures (no database) ---

@pytest.fixture
def school():
    return SchoolInfo(
        name="MagMax Educational Centre",
        address_lines=(
            "P. O. Box NB 481 - NII BOIMAH",
            "10TH AVENUE, MCCARTHY HILL, ACCRA",
            "0244126130 / 0594738900 / 0544263109",
        ),
    )


@pytest.fixture
def sample_record():
    """Two subjects, attendance, no comments, rank 3."""
    return ReportRecord(
        student=ReportStudent(name="Ama Mensah", class_name="JHS 2"),
        scores=[
            ScoreLine(subject_name="Math", class_score=30, exam_score=28),
            ScoreLine(subject_name="English", class_score=25, exam_score=20),
        ],
        attendance=AttendanceInfo(present_days=80, total_days=90),
        rank=3,
    )


@pytest.fixture
def fake_measure():
    """Monospace stand-in for font metrics: every glyph is half the font size."""
    return lambda text, font, size: len(text) * size * 0.5


# --- Database and HTTP fixtures ---

@pytest_asyncio.fixture
async def setup_db():
    """Give each test an empty schema."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield


@pytest_asyncio.fixture
async def client(setup_db):
    """Async HTTP test client with the clock pinned to FIXED_TODAY."""
    app.dependency_overrides[get_today] = lambda: FIXED_TODAY
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def _commit(*objects):
    async with AsyncSessionLocal() as session:
        for obj in objects:
            session.add(obj)
            # Insert in FK dependency order: we set raw UUID foreign keys,
            # so SQLAlchemy can't infer the order across objects.
            await session.commit()
        for obj in objects:
            await session.refresh(obj)


@pytest_asyncio.fixture
async def test_subjects(setup_db):
    """Math and English in the subject catalog."""
    math = Subject(id=uuid.uuid4(), name="Math")
    english = Subject(id=uuid.uuid4(), name="English")
    await _commit(math, english)
    return {"Math": math, "English": english}


@pytest_asyncio.fixture
async def test_student(test_subjects):
    """A student with two scores, attendance and comments.

    Math 30 + 28 = 58, English 25 + 20 = 45, grand total 103.
    """
    student = Student(id=uuid.uuid4(), name="Ama Mensah", class_name="JHS 2")
    await _commit(
        student,
        Score(
            id=uuid.uuid4(), student_id=student.id,
            subject_id=test_subjects["Math"].id, class_score=30, exam_score=28,
        ),
        Score(
            id=uuid.uuid4(), student_id=student.id,
            subject_id=test_subjects["English"].id, class_score=25, exam_score=20,
        ),
        Attendance(id=uuid.uuid4(), student_id=student.id, present_days=80, total_days=90),
        TeacherComment(
            id=uuid.uuid4(), student_id=student.id,
            interest="Football", conduct="Respectful", behavior="Calm",
        ),
    )
    return student


@pytest_asyncio.fixture
async def test_rival(test_subjects):
    """A stronger classmate (grand total 170) with no attendance or comments."""
    student = Student(id=uuid.uuid4(), name="Kofi Boateng", class_name="JHS 2")
    await _commit(
        student,
        Score(
            id=uuid.uuid4(), student_id=student.id,
            subject_id=test_subjects["Math"].id, class_score=45, exam_score=45,
        ),
        Score(
            id=uuid.uuid4(), student_id=student.id,
            subject_id=test_subjects["English"].id, class_score=40, exam_score=40,
        ),
    )
    return student
