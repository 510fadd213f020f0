# /gradeflow/services/task_helpers/payloads.py

"""
Builders for the records a transition writes: completed/deleted task copies,
spawned follow-up tasks and new student test results.

Spawned tasks and results get ids derived from what triggered them, so
replaying the same transition produces the same ids and the storage layer's
primary-key and uniqueness constraints reject the duplicate.
"""

import uuid
from datetime import datetime
from typing import Optional

from ...models import task_model, test_model, result_model
from ..grading_helpers.mark_aggregator import compute_average_and_outcome

_SPAWN_NAMESPACE = uuid.UUID("6f1c2a4e-93b1-4c55-9a0e-2d7f3c1b8e10")

_SPAWNED_TASK_TITLES = {
    task_model.TaskType.ENTER_MARKS: ("Enter marks", "Enter the marks for {test}."),
    task_model.TaskType.VALIDATE_MARKS: ("Validate marks", "Validate the marks entered for {test}."),
}

def new_task_id() -> str:
    return f"task_{uuid.uuid4().hex[:16]}"

def spawned_task_id(source_task_id: str, task_type: task_model.TaskType) -> str:
    return f"task_{uuid.uuid5(_SPAWN_NAMESPACE, f'{source_task_id}/{task_type.value}').hex[:16]}"

def result_id(test_id: str, student_id: str) -> str:
    return f"str_{uuid.uuid5(_SPAWN_NAMESPACE, f'{test_id}/{student_id}').hex[:16]}"

def build_new_task(task_input: task_model.TaskCreate, user_id: str, now: datetime,
                   task_id: Optional[str] = None) -> task_model.Task:
    return task_model.Task(
        id=task_id or new_task_id(),
        test=task_input.test,
        user=task_input.user,
        title=task_input.title,
        description=task_input.description,
        task_type=task_input.task_type,
        task_status=task_model.TaskStatus.PENDING,
        due_date=task_input.due_date,
        created_by=user_id, created_at=now,
        updated_by=user_id, updated_at=now,
    )

def build_spawned_task(source: task_model.Task, test: test_model.TestDefinition, task_type: task_model.TaskType,
                       assignee: str, due_date: Optional[datetime], user_id: str, now: datetime) -> task_model.Task:
    title, description = _SPAWNED_TASK_TITLES[task_type]
    return task_model.Task(
        id=spawned_task_id(source.id, task_type),
        test=source.test,
        user=assignee,
        title=f"{title}: {test.name}",
        description=description.format(test=test.name),
        task_type=task_type,
        task_status=task_model.TaskStatus.PENDING,
        due_date=due_date,
        source_task=source.id,
        created_by=user_id, created_at=now,
        updated_by=user_id, updated_at=now,
    )

def completed(task: task_model.Task, user_id: str, now: datetime) -> task_model.Task:
    return task.model_copy(update={
        "task_status": task_model.TaskStatus.COMPLETED,
        "completed_by": user_id,
        "completed_at": now,
        "updated_by": user_id,
        "updated_at": now,
    })

def deleted(task: task_model.Task, user_id: str, now: datetime) -> task_model.Task:
    return task.model_copy(update={
        "task_status": task_model.TaskStatus.DELETED,
        # completed_by/at are only set while COMPLETED.
        "completed_by": None,
        "completed_at": None,
        "deleted_by": user_id,
        "deleted_at": now,
        "updated_by": user_id,
        "updated_at": now,
    })

def build_student_test_result(enter_marks: result_model.EnterMarksInput, test: test_model.TestDefinition,
                              user_id: str, now: datetime) -> result_model.StudentTestResult:
    summary = compute_average_and_outcome(enter_marks.marks, test.test_passing_criteria)
    return result_model.StudentTestResult(
        id=result_id(enter_marks.test, enter_marks.student),
        student=enter_marks.student,
        test=enter_marks.test,
        marks=enter_marks.marks,
        average_mark=summary.average_mark,
        test_outcome=summary.test_outcome,
        mark_entry_date=now,
        student_test_result_status=result_model.ResultStatus.PENDING,
        created_by=user_id, created_at=now,
        updated_by=user_id, updated_at=now,
    )

def validated(result: result_model.StudentTestResult, user_id: str, now: datetime) -> result_model.StudentTestResult:
    return result.model_copy(update={
        "student_test_result_status": result_model.ResultStatus.VALIDATED,
        "mark_validated_date": now,
        "updated_by": user_id,
        "updated_at": now,
    })
