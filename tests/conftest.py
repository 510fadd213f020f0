# /tests/conftest.py

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gradeflow.db.base import Base
from gradeflow.db.database import get_db
from gradeflow.models import test_model, task_model, result_model
from gradeflow.services.database_service import DatabaseService
from gradeflow.services.grading_helpers.criteria_validator import validate_passing_criteria

NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)
EARLIER = datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc)

TEST_ID = "test_algebra"

NOTATIONS = [
    {"notation_text": "A", "max_points": 20},
    {"notation_text": "B", "max_points": 20},
]

# Pass on an average of at least 10; fail outright if A is below 5.
CRITERIA = {
    "pass_criteria": {"test_criteria_groups": [
        {"conditions": [{"criteria_type": "AVERAGE", "comparison_operator": "GTE", "mark": 10}]},
    ]},
    "fail_criteria": {"test_criteria_groups": [
        {"conditions": [{"criteria_type": "MARK", "comparison_operator": "LT", "mark": 5, "notation_text": "A"}]},
    ]},
}


# --- Engine Fixtures ---

@pytest.fixture
def test_definition():
    """A fully validated test definition with two notations and both branches."""
    return test_model.TestDefinition(
        id=TEST_ID,
        name="Algebra mid-term",
        description="Linear equations and inequalities.",
        weight=0.5,
        notations=NOTATIONS,
        test_passing_criteria=validate_passing_criteria(CRITERIA, NOTATIONS),
        tasks=[],
    )


@pytest.fixture
def make_task():
    """Factory for tasks in any type and status, created by the coordinator."""
    def _make(task_type, task_status=task_model.TaskStatus.PENDING, task_id="task_1", created_by="coordinator_1"):
        completed = task_status == task_model.TaskStatus.COMPLETED
        return task_model.Task(
            id=task_id,
            test=TEST_ID,
            user="teacher_7",
            title="Grading task",
            description="A task in the grading workflow.",
            task_type=task_type,
            task_status=task_status,
            completed_by=created_by if completed else None,
            completed_at=EARLIER if completed else None,
            created_by=created_by,
            created_at=EARLIER,
            updated_by=created_by,
            updated_at=EARLIER,
        )
    return _make


@pytest.fixture
def make_result():
    def _make(status=result_model.ResultStatus.PENDING, test_id=TEST_ID, result_id="str_1"):
        return result_model.StudentTestResult(
            id=result_id,
            student="student_1",
            test=test_id,
            marks=[{"notation_text": "A", "mark": 12}, {"notation_text": "B", "mark": 8}],
            average_mark=10.0,
            test_outcome=test_model.TestOutcome.PASS,
            mark_entry_date=EARLIER,
            student_test_result_status=status,
            created_by="teacher_7",
            created_at=EARLIER,
            updated_by="teacher_7",
            updated_at=EARLIER,
        )
    return _make


# --- Database Fixtures ---

@pytest.fixture
def db_session():
    """
    A session bound to a fresh in-memory SQLite database. StaticPool keeps a
    single connection so every session sees the same tables.
    """
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_service(db_session):
    return DatabaseService(db_session=db_session)


@pytest.fixture
def stored_test(db_service, test_definition):
    """Persists the `test_definition` fixture and returns the ORM row."""
    record = test_definition.model_dump(mode="json", exclude_none=True)
    return db_service.add_test(record)


@pytest.fixture
def client(db_session):
    """A TestClient whose requests all run against the in-memory database."""
    from gradeflow.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
