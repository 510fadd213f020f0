# /gradeflow/services/grading_service.py

"""
The grading engine's public contract.

This module is the single import point for callers that embed the engine as
a library. Every function here is synchronous, keeps no state between calls
and never touches storage or the network: records come in already fetched,
and decisions or effect payloads go out.
"""

from datetime import datetime
from typing import Any, Mapping, Optional, Sequence, Union

from ..models import test_model, task_model, result_model, effect_model, transcript_model
from .grading_helpers import criteria_validator, criteria_evaluator, mark_aggregator, rollup
from .task_helpers import state_machine


def validate_passing_criteria(
    criteria: Union[Mapping[str, Any], test_model.TestPassingCriteria],
    notations: Sequence[Any],
) -> test_model.TestPassingCriteria:
    """Returns the validated criteria tree or raises `ValidationFailure`."""
    return criteria_validator.validate_passing_criteria(criteria, notations)


def evaluate_branch(
    branch: Optional[test_model.CriteriaBranch],
    marks: Sequence[Any],
    average: float,
) -> bool:
    return criteria_evaluator.evaluate_branch(branch, marks, average)


def compute_average_and_outcome(
    marks: Sequence[Any],
    criteria: Optional[test_model.TestPassingCriteria],
) -> result_model.MarkSummary:
    return mark_aggregator.compute_average_and_outcome(marks, criteria)


def apply_task_transition(
    task: task_model.Task,
    kind: task_model.TransitionKind,
    payload: Any,
    user_id: str,
    now: datetime,
) -> effect_model.TransitionOutcome:
    """Returns the updated task plus dependent effects, or raises a typed failure."""
    return state_machine.apply_task_transition(task, kind, payload, user_id, now)


def create_task(task_input: task_model.TaskCreate, user_id: str, now: datetime) -> effect_model.TransitionOutcome:
    return state_machine.create_task(task_input, user_id, now)


def rollup_transcript(
    blocks: Sequence[transcript_model.BlockEntry],
    student_id: Optional[str] = None,
) -> transcript_model.TranscriptRollup:
    return rollup.rollup_transcript(blocks, student_id=student_id)
