# /tests/test_criteria_evaluator.py

import pytest

from gradeflow.models import test_model
from gradeflow.services.grading_helpers import criteria_evaluator, mark_aggregator
from gradeflow.services.grading_helpers.criteria_validator import validate_passing_criteria

from conftest import NOTATIONS, CRITERIA


def _condition(criteria_type, operator, mark, notation_text=None):
    return {"criteria_type": criteria_type, "comparison_operator": operator, "mark": mark, "notation_text": notation_text}


def _branch(*groups):
    """Validates a pass branch built from lists of raw conditions."""
    criteria = {"pass_criteria": {"test_criteria_groups": [{"conditions": list(group)} for group in groups]}}
    return validate_passing_criteria(criteria, NOTATIONS).pass_criteria


# --- Condition Semantics ---

@pytest.mark.parametrize("operator, threshold, expected", [
    ("GTE", 10, True), ("GTE", 10.5, False),
    ("LTE", 10, True), ("LTE", 9.5, False),
    ("GT", 9, True), ("GT", 10, False),
    ("LT", 11, True), ("LT", 10, False),
    ("E", 10, True), ("E", 10.01, False),
])
def test_each_operator_compares_observed_against_threshold(operator, threshold, expected):
    branch = _branch([_condition("MARK", operator, threshold, "A")])
    assert criteria_evaluator.evaluate_branch(branch, [{"notation_text": "A", "mark": 10}], 0) is expected


def test_average_condition_uses_the_supplied_average():
    branch = _branch([_condition("AVERAGE", "GTE", 10)])
    assert criteria_evaluator.evaluate_branch(branch, [], 10.0) is True
    assert criteria_evaluator.evaluate_branch(branch, [], 9.99) is False


def test_missing_mark_makes_condition_false_without_raising():
    branch = _branch([_condition("MARK", "LT", 5, "A")])
    assert criteria_evaluator.evaluate_branch(branch, [{"notation_text": "B", "mark": 0}], 0) is False


def test_absent_branch_is_never_satisfied():
    assert criteria_evaluator.evaluate_branch(None, [{"notation_text": "A", "mark": 20}], 20) is False


# --- Group And Branch Semantics ---

def test_group_requires_every_condition():
    both = [_condition("MARK", "GTE", 10, "A"), _condition("MARK", "GTE", 10, "B")]
    branch = _branch(both)
    assert criteria_evaluator.evaluate_branch(branch, [{"notation_text": "A", "mark": 12}, {"notation_text": "B", "mark": 9}], 0) is False
    assert criteria_evaluator.evaluate_branch(branch, [{"notation_text": "A", "mark": 12}, {"notation_text": "B", "mark": 10}], 0) is True


def test_branch_requires_any_group():
    branch = _branch([_condition("MARK", "GTE", 15, "A")], [_condition("MARK", "GTE", 15, "B")])
    assert criteria_evaluator.evaluate_branch(branch, [{"notation_text": "A", "mark": 3}, {"notation_text": "B", "mark": 16}], 0) is True


def test_adding_a_group_never_unsatisfies_a_branch():
    marks = [{"notation_text": "A", "mark": 12}, {"notation_text": "B", "mark": 8}]
    satisfied = [_condition("MARK", "GTE", 12, "A")]
    assert criteria_evaluator.evaluate_branch(_branch(satisfied), marks, 10) is True
    assert criteria_evaluator.evaluate_branch(_branch(satisfied, [_condition("MARK", "GT", 19, "B")]), marks, 10) is True


def test_adding_a_condition_can_unsatisfy_a_group():
    marks = [{"notation_text": "A", "mark": 12}, {"notation_text": "B", "mark": 8}]
    group = [_condition("MARK", "GTE", 12, "A")]
    assert criteria_evaluator.evaluate_branch(_branch(group), marks, 10) is True
    assert criteria_evaluator.evaluate_branch(_branch(group + [_condition("MARK", "GTE", 9, "B")]), marks, 10) is False


def test_evaluation_is_deterministic():
    branch = _branch([_condition("AVERAGE", "GT", 7)], [_condition("MARK", "E", 3, "A")])
    marks = [{"notation_text": "A", "mark": 3}]
    results = {criteria_evaluator.evaluate_branch(branch, marks, 1.5) for _ in range(5)}
    assert results == {True}


# --- Averages And Outcomes ---

def test_average_is_the_rounded_mean():
    assert mark_aggregator.compute_average([{"notation_text": "A", "mark": 12}, {"notation_text": "B", "mark": 8}]) == 10.0
    assert mark_aggregator.compute_average([{"notation_text": "A", "mark": 10}, {"notation_text": "B", "mark": 10},
                                            {"notation_text": "C", "mark": 11}]) == 10.33


def test_average_of_no_marks_is_zero():
    assert mark_aggregator.compute_average([]) == 0


def test_worked_example_fails_on_the_low_mark():
    """
    A=3 and B=15 average to 9.0. The pass branch (average >= 10) does not hold
    and the fail branch (A < 5) does, so the result is FAIL.
    """
    criteria = validate_passing_criteria(CRITERIA, NOTATIONS)
    summary = mark_aggregator.compute_average_and_outcome(
        [{"notation_text": "A", "mark": 3}, {"notation_text": "B", "mark": 15}], criteria,
    )
    assert summary.average_mark == 9.0
    assert summary.test_outcome == test_model.TestOutcome.FAIL


def test_fail_branch_takes_precedence_over_pass_branch():
    criteria = validate_passing_criteria(CRITERIA, NOTATIONS)
    # Average 12 satisfies the pass branch, A=4 satisfies the fail branch.
    summary = mark_aggregator.compute_average_and_outcome(
        [{"notation_text": "A", "mark": 4}, {"notation_text": "B", "mark": 20}], criteria,
    )
    assert summary.average_mark == 12.0
    assert summary.test_outcome == test_model.TestOutcome.FAIL


def test_pass_when_only_pass_branch_holds():
    criteria = validate_passing_criteria(CRITERIA, NOTATIONS)
    summary = mark_aggregator.compute_average_and_outcome(
        [{"notation_text": "A", "mark": 12}, {"notation_text": "B", "mark": 8}], criteria,
    )
    assert summary.test_outcome == test_model.TestOutcome.PASS


def test_indeterminate_when_neither_branch_holds():
    criteria = validate_passing_criteria(CRITERIA, NOTATIONS)
    summary = mark_aggregator.compute_average_and_outcome(
        [{"notation_text": "A", "mark": 6}, {"notation_text": "B", "mark": 6}], criteria,
    )
    assert summary.test_outcome == test_model.TestOutcome.INDETERMINATE


def test_no_criteria_is_indeterminate():
    summary = mark_aggregator.compute_average_and_outcome([{"notation_text": "A", "mark": 20}], None)
    assert summary.average_mark == 20
    assert summary.test_outcome == test_model.TestOutcome.INDETERMINATE


def test_accepts_mark_models(make_result):
    result = make_result()
    summary = mark_aggregator.compute_average_and_outcome(result.marks, validate_passing_criteria(CRITERIA, NOTATIONS))
    assert summary.average_mark == 10.0
    assert summary.test_outcome == test_model.TestOutcome.PASS
