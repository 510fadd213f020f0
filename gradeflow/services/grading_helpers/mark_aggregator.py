# /gradeflow/services/grading_helpers/mark_aggregator.py

from typing import Any, Mapping, Optional, Sequence

from ...models import test_model, result_model
from .criteria_evaluator import evaluate_branch

def compute_average(marks: Sequence[Any]) -> float:
    """Arithmetic mean of the entered marks, rounded to 2 decimals; 0 when empty."""
    values = [m.get("mark") if isinstance(m, Mapping) else m.mark for m in marks or []]
    if not values:
        return 0
    return round(sum(values) / len(values), 2)

def classify_outcome(
    criteria: Optional[test_model.TestPassingCriteria],
    marks: Sequence[Any],
    average: float,
) -> test_model.TestOutcome:
    """
    FAIL if the fail branch holds, else PASS if the pass branch holds, else
    INDETERMINATE. The fail branch is checked first so an explicit failure
    condition always overrides a satisfied pass condition.
    """
    if criteria is None:
        return test_model.TestOutcome.INDETERMINATE
    if evaluate_branch(criteria.fail_criteria, marks, average):
        return test_model.TestOutcome.FAIL
    if evaluate_branch(criteria.pass_criteria, marks, average):
        return test_model.TestOutcome.PASS
    return test_model.TestOutcome.INDETERMINATE

def compute_average_and_outcome(
    marks: Sequence[Any],
    criteria: Optional[test_model.TestPassingCriteria],
) -> result_model.MarkSummary:
    average = compute_average(marks)
    return result_model.MarkSummary(
        average_mark=average,
        test_outcome=classify_outcome(criteria, marks, average),
    )
