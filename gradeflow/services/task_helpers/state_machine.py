# /gradeflow/services/task_helpers/state_machine.py

"""
The task lifecycle as an explicit state machine.

Every transition is a pure function of (task, payload, acting user, now) that
either raises a typed failure or returns a `TransitionOutcome`: the updated
task, the status the stored task must still have at commit time, and the
dependent effects as data. Nothing here reads a clock or touches storage.

    PENDING / IN_PROGRESS --AssignCorrector--> COMPLETED  (+ ENTER_MARKS task, email)
    PENDING / IN_PROGRESS --EnterMarks-------> COMPLETED  (+ result, VALIDATE_MARKS task)
    PENDING / IN_PROGRESS --ValidateMarks----> COMPLETED  (result -> VALIDATED)
    any but DELETED ------- UpdateTask ------> same status unless explicitly moved
    any but DELETED ------- DeleteTask ------> DELETED    (pulled from test)
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from ...models import task_model, result_model, effect_model
from ..errors import ValidationFailure, StateConflict, NotFound
from ..grading_helpers.criteria_validator import validate_marks_input
from . import payloads
from .notification import build_assign_corrector_email

logger = logging.getLogger(__name__)

TaskStatus = task_model.TaskStatus
TaskType = task_model.TaskType

# A completion transition may only start from one of these.
OPEN_STATUSES = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)

# --- Precondition Guards ---

def _require_type(task: task_model.Task, expected: TaskType) -> None:
    if task.task_type != expected:
        raise StateConflict(
            f"Task {task.id} is a {task.task_type.value} task; this transition requires {expected.value}.",
            field="task_type",
        )

def _require_open(task: task_model.Task) -> None:
    if task.task_status not in OPEN_STATUSES:
        raise StateConflict(f"Task {task.id} is already {task.task_status.value}.", field="task_status")

def _require_not_deleted(task: task_model.Task) -> None:
    if task.task_status == TaskStatus.DELETED:
        raise StateConflict(f"Task {task.id} is already DELETED.", field="task_status")

def _require_payload(payload: Any, expected: type, kind: task_model.TransitionKind) -> None:
    if not isinstance(payload, expected):
        raise ValidationFailure(f"{kind.value} requires a {expected.__name__}.", field="payload")

# --- Transitions ---

def _assign_corrector(task, payload, user_id, now) -> effect_model.TransitionOutcome:
    _require_type(task, TaskType.ASSIGN_CORRECTOR)
    _require_open(task)
    _require_payload(payload, task_model.AssignCorrectorPayload, task_model.TransitionKind.ASSIGN_CORRECTOR)

    enter_marks_task = payloads.build_spawned_task(
        task, payload.test, TaskType.ENTER_MARKS,
        assignee=payload.corrector_id, due_date=payload.enter_marks_due_date,
        user_id=user_id, now=now,
    )
    effects = [
        effect_model.CreateTaskEffect(task=enter_marks_task),
        effect_model.TaskListEffect(kind="push_task_to_test", test_id=task.test, task_id=enter_marks_task.id),
    ]
    if payload.corrector_email:
        effects.append(build_assign_corrector_email(
            payload.corrector_email, payload.test, payload.subject_name, payload.student_names,
        ))
    return effect_model.TransitionOutcome(
        task=payloads.completed(task, user_id, now),
        expected_status=task.task_status,
        effects=tuple(effects),
    )

def _enter_marks(task, payload, user_id, now) -> effect_model.TransitionOutcome:
    _require_type(task, TaskType.ENTER_MARKS)
    _require_open(task)
    _require_payload(payload, task_model.EnterMarksPayload, task_model.TransitionKind.ENTER_MARKS)

    enter_marks = payload.enter_marks
    if enter_marks.test != task.test:
        raise ValidationFailure(
            f"Marks were entered for test {enter_marks.test} but task {task.id} belongs to test {task.test}.",
            field="enterMarksInput.test",
        )
    validate_marks_input(enter_marks.marks, payload.test.notations)
    if payload.existing_result is not None:
        raise StateConflict(
            f"Student {enter_marks.student} already has a result ({payload.existing_result.id}) for test {enter_marks.test}.",
            field="enterMarksInput.student",
        )

    result = payloads.build_student_test_result(enter_marks, payload.test, user_id, now)
    validate_marks_task = payloads.build_spawned_task(
        task, payload.test, TaskType.VALIDATE_MARKS,
        assignee=payload.validator_id or task.created_by, due_date=payload.validate_marks_due_date,
        user_id=user_id, now=now,
    )
    return effect_model.TransitionOutcome(
        task=payloads.completed(task, user_id, now),
        expected_status=task.task_status,
        effects=(
            effect_model.CreateResultEffect(result=result),
            effect_model.CreateTaskEffect(task=validate_marks_task),
            effect_model.TaskListEffect(kind="push_task_to_test", test_id=task.test, task_id=validate_marks_task.id),
        ),
    )

def _validate_marks(task, payload, user_id, now) -> effect_model.TransitionOutcome:
    _require_type(task, TaskType.VALIDATE_MARKS)
    _require_open(task)
    _require_payload(payload, task_model.ValidateMarksPayload, task_model.TransitionKind.VALIDATE_MARKS)

    result = payload.result
    if result is None or result.deleted_at is not None:
        raise NotFound(f"Student test result {payload.student_test_result_id} not found.", field="student_test_result_id")
    if result.test != task.test:
        raise ValidationFailure(
            f"Result {result.id} belongs to test {result.test}, not to the task's test {task.test}.",
            field="student_test_result_id",
        )
    if result.student_test_result_status != result_model.ResultStatus.PENDING:
        raise StateConflict(
            f"Result {result.id} is already {result.student_test_result_status.value}.",
            field="student_test_result_status",
        )

    return effect_model.TransitionOutcome(
        task=payloads.completed(task, user_id, now),
        expected_status=task.task_status,
        effects=(effect_model.UpdateResultEffect(
            result=payloads.validated(result, user_id, now),
            expected_status=result_model.ResultStatus.PENDING,
        ),),
    )

def _update_task(task, payload, user_id, now) -> effect_model.TransitionOutcome:
    _require_not_deleted(task)
    _require_payload(payload, task_model.TaskUpdate, task_model.TransitionKind.UPDATE_TASK)

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationFailure("No update data provided.")

    new_status = changes.get("task_status")
    if new_status is not None and new_status != task.task_status:
        if new_status not in OPEN_STATUSES:
            raise ValidationFailure(
                f"task_status can only be set to {' or '.join(s.value for s in OPEN_STATUSES)}; "
                f"use the dedicated transition to complete or delete a task.",
                field="task_status",
            )
        _require_open(task)

    changes.update(updated_by=user_id, updated_at=now)
    return effect_model.TransitionOutcome(
        task=task.model_copy(update=changes),
        expected_status=task.task_status,
    )

def _delete_task(task, payload, user_id, now) -> effect_model.TransitionOutcome:
    _require_not_deleted(task)
    return effect_model.TransitionOutcome(
        task=payloads.deleted(task, user_id, now),
        expected_status=task.task_status,
        effects=(effect_model.TaskListEffect(kind="pull_task_from_test", test_id=task.test, task_id=task.id),),
    )

_TRANSITIONS: Dict[task_model.TransitionKind, Callable[..., effect_model.TransitionOutcome]] = {
    task_model.TransitionKind.ASSIGN_CORRECTOR: _assign_corrector,
    task_model.TransitionKind.ENTER_MARKS: _enter_marks,
    task_model.TransitionKind.VALIDATE_MARKS: _validate_marks,
    task_model.TransitionKind.UPDATE_TASK: _update_task,
    task_model.TransitionKind.DELETE_TASK: _delete_task,
}

# --- Public Entry Points ---

def apply_task_transition(
    task: task_model.Task,
    kind: task_model.TransitionKind,
    payload: Any,
    user_id: str,
    now: datetime,
) -> effect_model.TransitionOutcome:
    """
    Decides a transition on an existing task. Raises `StateConflict`,
    `ValidationFailure` or `NotFound` without producing any effect.
    """
    if not user_id:
        raise ValidationFailure("An acting user is required.", field="user_id")
    try:
        kind = task_model.TransitionKind(kind)
    except ValueError:
        raise ValidationFailure(
            f"Unknown transition '{kind}'; expected one of: {', '.join(k.value for k in task_model.TransitionKind)}.",
            field="kind",
        ) from None
    outcome = _TRANSITIONS[kind](task, payload, user_id, now)
    logger.debug("Transition %s on task %s: %s -> %s with %d effect(s)",
                  kind.value, task.id, task.task_status.value, outcome.task.task_status.value, len(outcome.effects))
    return outcome

def create_task(
    task_input: task_model.TaskCreate,
    user_id: str,
    now: datetime,
    task_id: Optional[str] = None,
) -> effect_model.TransitionOutcome:
    """A new PENDING task, attached to its test's task list on commit."""
    if not user_id:
        raise ValidationFailure("An acting user is required.", field="user_id")
    task = payloads.build_new_task(task_input, user_id, now, task_id=task_id)
    return effect_model.TransitionOutcome(
        task=task,
        expected_status=None,
        effects=(effect_model.TaskListEffect(kind="push_task_to_test", test_id=task.test, task_id=task.id),),
    )
