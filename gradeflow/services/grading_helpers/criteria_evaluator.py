# /gradeflow/services/grading_helpers/criteria_evaluator.py

"""
Boolean evaluation of a validated criteria branch against entered marks.

A branch holds if ANY of its groups holds; a group holds if ALL of its
conditions hold. The evaluator is total: a MARK condition whose notation has
no entered mark is simply not satisfied.
"""

import operator
from typing import Any, Dict, Iterable, Mapping, Optional

from ...models import test_model

_COMPARATORS = {
    test_model.ComparisonOperator.GTE: operator.ge,
    test_model.ComparisonOperator.LTE: operator.le,
    test_model.ComparisonOperator.GT: operator.gt,
    test_model.ComparisonOperator.LT: operator.lt,
    test_model.ComparisonOperator.E: operator.eq,
}

def index_marks(marks: Iterable[Any]) -> Dict[str, float]:
    """Maps notation text to entered mark. Accepts Mark models or plain mappings."""
    indexed = {}
    for entry in marks or []:
        if isinstance(entry, Mapping):
            indexed[entry.get("notation_text")] = entry.get("mark")
        else:
            indexed[entry.notation_text] = entry.mark
    return indexed

def evaluate_condition(condition: test_model.Condition, marks_by_notation: Dict[str, float], average: float) -> bool:
    if condition.criteria_type == test_model.CriteriaType.AVERAGE:
        observed = average
    else:
        observed = marks_by_notation.get(condition.notation_text)
    if observed is None:
        return False
    return _COMPARATORS[condition.comparison_operator](observed, condition.mark)

def evaluate_group(group: test_model.CriteriaGroup, marks_by_notation: Dict[str, float], average: float) -> bool:
    return all(evaluate_condition(c, marks_by_notation, average) for c in group.conditions)

def evaluate_branch(branch: Optional[test_model.CriteriaBranch], marks: Iterable[Any], average: float) -> bool:
    """True if the branch is present and at least one of its groups is satisfied."""
    if branch is None:
        return False
    marks_by_notation = index_marks(marks)
    return any(evaluate_group(g, marks_by_notation, average) for g in branch.test_criteria_groups)
