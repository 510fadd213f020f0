# /gradeflow/services/task_service.py

"""
Orchestrates the grading task lifecycle for the request layer.

Each operation follows the same three steps: fetch the records the transition
needs, let the state machine decide (stamping the current time here, at the
boundary), then hand the outcome to the database executor which commits it
atomically. Notifications produced by a transition are only released after
that commit succeeds.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

from ..models import task_model, test_model, result_model, effect_model
from .database_service import DatabaseService
from .errors import NotFound
from .task_helpers import state_machine

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# --- Loading Helpers ---

def _load_task(task_id: str, db: DatabaseService) -> task_model.Task:
    task = db.get_task(task_id)
    if task is None:
        raise NotFound(f"Task {task_id} not found.", field="task_id")
    return task_model.Task.model_validate(task)

def _load_test(test_id: str, db: DatabaseService) -> test_model.TestDefinition:
    test = db.get_test(test_id)
    if test is None:
        raise NotFound(f"Test {test_id} not found.", field="test")
    return test_model.TestDefinition.model_validate(test)

def _load_result(result_id: str, db: DatabaseService) -> Optional[result_model.StudentTestResult]:
    result = db.get_result(result_id)
    return result_model.StudentTestResult.model_validate(result) if result is not None else None

def _run_transition(
    task: task_model.Task,
    kind: task_model.TransitionKind,
    payload: Any,
    db: DatabaseService,
    user_id: str,
) -> Tuple[effect_model.TransitionOutcome, List[effect_model.NotificationEffect]]:
    outcome = state_machine.apply_task_transition(task, kind, payload, user_id, _now())
    notifications = db.commit_transition(outcome)
    logger.info("Task %s: %s committed by %s (%s -> %s)",
                task.id, kind.value, user_id, task.task_status.value, outcome.task.task_status.value)
    return outcome, notifications


# --- Queries ---

def get_task(task_id: str, db: DatabaseService) -> task_model.Task:
    return _load_task(task_id, db)

def list_tasks(
    db: DatabaseService,
    task_status: Optional[task_model.TaskStatus] = None,
    test_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> List[task_model.Task]:
    rows = db.get_tasks(task_status=task_status.value if task_status else None, test_id=test_id, user_id=user_id)
    return [task_model.Task.model_validate(row) for row in rows]


# --- Mutations ---

def create_task(task_data: task_model.TaskCreate, db: DatabaseService, user_id: str) -> task_model.Task:
    _load_test(task_data.test, db)
    outcome = state_machine.create_task(task_data, user_id, _now())
    db.commit_transition(outcome)
    logger.info("Created %s task %s on test %s", task_data.task_type.value, outcome.task.id, task_data.test)
    return outcome.task

def update_task(task_id: str, task_update: task_model.TaskUpdate, db: DatabaseService, user_id: str) -> task_model.Task:
    task = _load_task(task_id, db)
    outcome, _ = _run_transition(task, task_model.TransitionKind.UPDATE_TASK, task_update, db, user_id)
    return outcome.task

def delete_task(task_id: str, db: DatabaseService, user_id: str) -> task_model.Task:
    task = _load_task(task_id, db)
    outcome, _ = _run_transition(task, task_model.TransitionKind.DELETE_TASK, None, db, user_id)
    return outcome.task

def assign_corrector(
    task_id: str,
    request: task_model.AssignCorrectorRequest,
    db: DatabaseService,
    user_id: str,
) -> task_model.AssignCorrectorResponse:
    task = _load_task(task_id, db)
    payload = task_model.AssignCorrectorPayload(
        corrector_id=request.corrector_id,
        corrector_email=request.corrector_email,
        enter_marks_due_date=request.enter_marks_due_date,
        subject_name=request.subject_name,
        student_names=request.student_names,
        test=_load_test(task.test, db),
    )
    outcome, notifications = _run_transition(task, task_model.TransitionKind.ASSIGN_CORRECTOR, payload, db, user_id)
    for notification in notifications:
        logger.info("Corrector notification ready for %s: %s", notification.recipient, notification.subject)
    return task_model.AssignCorrectorResponse(
        task=outcome.task,
        enter_marks_task=outcome.spawned_task,
        notification_recipient=notifications[0].recipient if notifications else None,
    )

def enter_marks(
    task_id: str,
    request: task_model.EnterMarksRequest,
    db: DatabaseService,
    user_id: str,
) -> task_model.EnterMarksResponse:
    task = _load_task(task_id, db)
    enter_marks_input = request.enter_marks_input
    existing = db.get_result_for_student(enter_marks_input.test, enter_marks_input.student)
    payload = task_model.EnterMarksPayload(
        enter_marks=enter_marks_input,
        test=_load_test(task.test, db),
        existing_result=result_model.StudentTestResult.model_validate(existing) if existing is not None else None,
        validate_marks_due_date=request.validate_marks_due_date,
        validator_id=request.validator_id,
    )
    outcome, _ = _run_transition(task, task_model.TransitionKind.ENTER_MARKS, payload, db, user_id)
    return task_model.EnterMarksResponse(
        student_test_result=outcome.result,
        validate_marks_task=outcome.spawned_task,
    )

def validate_marks(
    task_id: str,
    request: task_model.ValidateMarksRequest,
    db: DatabaseService,
    user_id: str,
) -> task_model.ValidateMarksResponse:
    task = _load_task(task_id, db)
    payload = task_model.ValidateMarksPayload(
        student_test_result_id=request.student_test_result_id,
        result=_load_result(request.student_test_result_id, db),
    )
    outcome, _ = _run_transition(task, task_model.TransitionKind.VALIDATE_MARKS, payload, db, user_id)
    return task_model.ValidateMarksResponse(
        student_test_result=outcome.result,
        validate_marks_task=outcome.task,
    )
