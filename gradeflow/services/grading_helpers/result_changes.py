# /gradeflow/services/grading_helpers/result_changes.py

"""
Direct corrections to a stored student test result, outside the task flow.

Only a PENDING result can be changed: once validated its marks and outcome
are final. Like the task transitions, these are pure functions of
(result, input, acting user, now) and leave persistence to the repository.
"""

from datetime import datetime
from typing import Any, Sequence

from ...models import result_model, test_model
from ..errors import StateConflict
from .criteria_validator import validate_marks_input
from .mark_aggregator import compute_average_and_outcome

def _require_pending(result: result_model.StudentTestResult) -> None:
    if result.deleted_at is not None:
        raise StateConflict(f"Result {result.id} is already deleted.", field="deleted_at")
    if result.student_test_result_status != result_model.ResultStatus.PENDING:
        raise StateConflict(
            f"Result {result.id} is already {result.student_test_result_status.value} and can no longer be changed.",
            field="student_test_result_status",
        )

def update_marks(
    result: result_model.StudentTestResult,
    marks: Sequence[Any],
    test: test_model.TestDefinition,
    user_id: str,
    now: datetime,
) -> result_model.StudentTestResult:
    """Replaces the marks and recomputes the average and outcome against the test's current criteria."""
    _require_pending(result)
    validate_marks_input(marks, test.notations, path="updateStudentTestResultInput.marks")
    summary = compute_average_and_outcome(marks, test.test_passing_criteria)
    return result.model_copy(update={
        "marks": tuple(result_model.Mark.model_validate(m) for m in marks),
        "average_mark": summary.average_mark,
        "test_outcome": summary.test_outcome,
        "mark_entry_date": now,
        "updated_by": user_id,
        "updated_at": now,
    })

def soft_delete(result: result_model.StudentTestResult, user_id: str, now: datetime) -> result_model.StudentTestResult:
    # The row stays, so the (student, test) pair remains taken.
    _require_pending(result)
    return result.model_copy(update={
        "deleted_by": user_id,
        "deleted_at": now,
        "updated_by": user_id,
        "updated_at": now,
    })
