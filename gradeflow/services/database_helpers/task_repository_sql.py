# /gradeflow/services/database_helpers/task_repository_sql.py

"""
SQLAlchemy queries for grading tasks, and the executor that commits the
outcome of a task transition.

`commit_transition` applies the task change and every persistence effect in
one transaction. The task row is only updated if it is still in the status
the transition was decided from; otherwise, or if a uniqueness constraint
rejects a duplicate result or follow-up task, the whole transaction is rolled
back and `StateConflict` is raised.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gradeflow.db.models.task_models import Task
from gradeflow.db.models.test_models import Test
from gradeflow.db.models.result_models import StudentTestResult
from gradeflow.models import effect_model
from ..errors import StateConflict, NotFound

logger = logging.getLogger(__name__)


def column_values(model: BaseModel, exclude: Optional[set] = None) -> Dict[str, Any]:
    """Flattens a Pydantic record into values the ORM columns accept."""
    values = model.model_dump(exclude=exclude)
    return {key: (value.value if isinstance(value, Enum) else value) for key, value in values.items()}


class TaskRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Task Queries ---

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.db.query(Task).filter(Task.id == task_id).first()

    def get_tasks(
        self,
        task_status: Optional[str] = None,
        test_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> List[Task]:
        """
        Lists tasks, most recent first. DELETED tasks are only returned when
        explicitly asked for through `task_status`.
        """
        query = self.db.query(Task)
        if task_status:
            query = query.filter(Task.task_status == task_status)
        else:
            query = query.filter(Task.task_status != "DELETED")
        if test_id:
            query = query.filter(Task.test == test_id)
        if user_id:
            query = query.filter(Task.user == user_id)
        return query.order_by(Task.created_at.desc()).all()

    # --- Transition Executor ---

    def commit_transition(self, outcome: effect_model.TransitionOutcome) -> List[effect_model.NotificationEffect]:
        """
        Atomically persists a transition outcome. Returns the notification
        effects, which must only be dispatched after this call succeeds.
        """
        try:
            self._apply_task_change(outcome)
            for effect in outcome.effects:
                self._apply_effect(effect)
            self.db.flush()
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning("Transition on task %s rejected by a uniqueness constraint: %s", outcome.task.id, e.orig)
            raise StateConflict(f"Task {outcome.task.id} transition would create a duplicate record.") from e
        except Exception:
            self.db.rollback()
            raise
        return outcome.notifications

    def _apply_task_change(self, outcome: effect_model.TransitionOutcome) -> None:
        if outcome.expected_status is None:
            self.db.add(Task(**column_values(outcome.task)))
            self.db.flush()
            return

        updated = (
            self.db.query(Task)
            .filter(Task.id == outcome.task.id, Task.task_status == outcome.expected_status.value)
            .update(column_values(outcome.task, exclude={"id"}), synchronize_session=False)
        )
        if updated == 0:
            raise StateConflict(
                f"Task {outcome.task.id} is no longer {outcome.expected_status.value}; the transition was not applied.",
                field="task_status",
            )

    def _apply_effect(self, effect: Any) -> None:
        if isinstance(effect, effect_model.CreateTaskEffect):
            self.db.add(Task(**column_values(effect.task)))
            self.db.flush()
        elif isinstance(effect, effect_model.CreateResultEffect):
            self.db.add(StudentTestResult(**column_values(effect.result)))
            self.db.flush()
        elif isinstance(effect, effect_model.UpdateResultEffect):
            updated = (
                self.db.query(StudentTestResult)
                .filter(
                    StudentTestResult.id == effect.result.id,
                    StudentTestResult.student_test_result_status == effect.expected_status.value,
                    StudentTestResult.deleted_at.is_(None),
                )
                .update(column_values(effect.result, exclude={"id"}), synchronize_session=False)
            )
            if updated == 0:
                raise StateConflict(
                    f"Result {effect.result.id} is no longer {effect.expected_status.value}.",
                    field="student_test_result_status",
                )
        elif isinstance(effect, effect_model.TaskListEffect):
            self._update_test_task_list(effect)
        # Notification effects are returned to the caller, not persisted.

    def _update_test_task_list(self, effect: effect_model.TaskListEffect) -> None:
        test = self.db.query(Test).filter(Test.id == effect.test_id).first()
        if not test:
            raise NotFound(f"Test {effect.test_id} not found.", field="test")
        task_ids = [task_id for task_id in (test.tasks or []) if task_id != effect.task_id]
        if effect.kind == "push_task_to_test":
            task_ids.append(effect.task_id)
        # Reassign so SQLAlchemy detects the change to the JSON column.
        test.tasks = task_ids
