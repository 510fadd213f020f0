# /gradeflow/models/effect_model.py

"""
Side effects produced by a task transition, expressed as data.

The state machine never writes anything itself. It returns a
`TransitionOutcome` and the task repository applies the task change plus
every persistence effect inside a single database transaction. Notification
effects are handed back to the caller once that transaction has committed.
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional, Tuple, Union, Literal, List

from .task_model import Task, TaskStatus
from .result_model import StudentTestResult, ResultStatus

class CreateTaskEffect(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["create_task"] = "create_task"
    task: Task

class TaskListEffect(BaseModel):
    """Adds a task id to, or removes it from, a test's `tasks` list."""
    model_config = ConfigDict(frozen=True)
    kind: Literal["push_task_to_test", "pull_task_from_test"]
    test_id: str
    task_id: str

class CreateResultEffect(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["create_result"] = "create_result"
    result: StudentTestResult

class UpdateResultEffect(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["update_result"] = "update_result"
    result: StudentTestResult
    # Commit is rejected unless the stored status still equals this.
    expected_status: ResultStatus

class NotificationEffect(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["send_notification"] = "send_notification"
    recipient: str
    sender: str
    subject: str
    html: str

Effect = Union[CreateTaskEffect, TaskListEffect, CreateResultEffect, UpdateResultEffect, NotificationEffect]

class TransitionOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)
    task: Task
    # None means `task` is new and must be inserted; otherwise the stored task
    # must still be in this status at commit time.
    expected_status: Optional[TaskStatus]
    effects: Tuple[Effect, ...] = ()

    @property
    def spawned_task(self) -> Optional[Task]:
        for effect in self.effects:
            if isinstance(effect, CreateTaskEffect):
                return effect.task
        return None

    @property
    def result(self) -> Optional[StudentTestResult]:
        for effect in self.effects:
            if isinstance(effect, (CreateResultEffect, UpdateResultEffect)):
                return effect.result
        return None

    @property
    def notifications(self) -> List[NotificationEffect]:
        return [e for e in self.effects if isinstance(e, NotificationEffect)]
