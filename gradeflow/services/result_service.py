# /gradeflow/services/result_service.py

"""
Queries and direct corrections on student test results. Results are created
and validated through the task lifecycle; this module only lets a PENDING
result be corrected or withdrawn before it is validated.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from ..models import result_model, test_model
from .database_service import DatabaseService
from .errors import NotFound
from .grading_helpers import result_changes

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)

def _load_result(result_id: str, db: DatabaseService) -> result_model.StudentTestResult:
    result = db.get_result(result_id)
    if result is None or result.deleted_at is not None:
        raise NotFound(f"Student test result {result_id} not found.", field="student_test_result_id")
    return result_model.StudentTestResult.model_validate(result)


# --- Queries ---

def get_result(result_id: str, db: DatabaseService) -> result_model.StudentTestResult:
    return _load_result(result_id, db)

def list_results(
    db: DatabaseService,
    result_status: Optional[result_model.ResultStatus] = None,
    test_id: Optional[str] = None,
    student_id: Optional[str] = None,
) -> List[result_model.StudentTestResult]:
    rows = db.get_results(result_status=result_status.value if result_status else None, test_id=test_id, student_id=student_id)
    return [result_model.StudentTestResult.model_validate(row) for row in rows]


# --- Mutations ---

def update_result(
    result_id: str,
    result_update: result_model.UpdateStudentTestResultInput,
    db: DatabaseService,
    user_id: str,
) -> result_model.StudentTestResult:
    result = _load_result(result_id, db)
    test = db.get_test(result.test)
    if test is None:
        raise NotFound(f"Test {result.test} not found.", field="test")
    updated = result_changes.update_marks(
        result, result_update.marks, test_model.TestDefinition.model_validate(test), user_id, _now(),
    )
    db.save_result_change(updated, expected_status=result_model.ResultStatus.PENDING)
    logger.info("Result %s: marks corrected by %s (average %s, %s)",
                result_id, user_id, updated.average_mark, updated.test_outcome.value)
    return updated

def delete_result(result_id: str, db: DatabaseService, user_id: str) -> result_model.StudentTestResult:
    result = _load_result(result_id, db)
    deleted = result_changes.soft_delete(result, user_id, _now())
    db.save_result_change(deleted, expected_status=result_model.ResultStatus.PENDING)
    logger.info("Result %s deleted by %s", result_id, user_id)
    return deleted
