# /gradeflow/services/grading_helpers/rollup.py

"""
Hierarchical composition of per-test outcomes into subject, block and
transcript outcomes.

Child outcomes are combined with the same criteria evaluator and the same
fail-first precedence used for a single test. Each required child becomes a
synthetic mark (PASS=1, INDETERMINATE=0.5, FAIL=0) and is classified against:

- a fail branch with one group per child, `child LT 0.5` (any child failed);
- a pass branch with a single group, `child E 1` for every child (all passed).

Anything else is INDETERMINATE. A node without required children PASSes.
Non-required children are reported but never influence their parent.

A test whose result already carries a recorded classification keeps it; the
criteria are only applied to entries without one.
"""

from typing import List, Optional, Sequence

from ...models import test_model, result_model, transcript_model
from .mark_aggregator import classify_outcome, compute_average_and_outcome

_OUTCOME_MARKS = {
    test_model.TestOutcome.PASS: 1.0,
    test_model.TestOutcome.INDETERMINATE: 0.5,
    test_model.TestOutcome.FAIL: 0.0,
}

def _child_condition(key: str, operator: test_model.ComparisonOperator, mark: float) -> test_model.Condition:
    return test_model.Condition(
        criteria_type=test_model.CriteriaType.MARK,
        comparison_operator=operator,
        mark=mark,
        notation_text=key,
    )

def combine_outcomes(outcomes: Sequence[test_model.TestOutcome]) -> test_model.TestOutcome:
    """Combines the outcomes of required children. No children yields PASS."""
    if not outcomes:
        return test_model.TestOutcome.PASS

    keys = [str(index) for index in range(len(outcomes))]
    marks = [result_model.Mark(notation_text=key, mark=_OUTCOME_MARKS[outcome]) for key, outcome in zip(keys, outcomes)]
    criteria = test_model.TestPassingCriteria(
        fail_criteria=test_model.CriteriaBranch(test_criteria_groups=tuple(
            test_model.CriteriaGroup(conditions=(_child_condition(key, test_model.ComparisonOperator.LT, 0.5),))
            for key in keys
        )),
        pass_criteria=test_model.CriteriaBranch(test_criteria_groups=(
            test_model.CriteriaGroup(conditions=tuple(
                _child_condition(key, test_model.ComparisonOperator.E, 1.0) for key in keys
            )),
        )),
    )
    # The synthetic criteria only use MARK conditions, so the average is irrelevant.
    return classify_outcome(criteria, marks, 0)

def _required_outcomes(children) -> List[test_model.TestOutcome]:
    return [child.outcome for child in children if child.required]

def rollup_test(entry: transcript_model.TestEntry) -> transcript_model.TestRollup:
    if entry.marks is None:
        return transcript_model.TestRollup(
            test_id=entry.test_id, name=entry.name, required=entry.required,
            outcome=test_model.TestOutcome.INDETERMINATE,
        )
    summary = compute_average_and_outcome(entry.marks, entry.test_passing_criteria)
    return transcript_model.TestRollup(
        test_id=entry.test_id, name=entry.name, required=entry.required,
        average_mark=summary.average_mark, outcome=entry.recorded_outcome or summary.test_outcome,
    )

def rollup_subject(subject: transcript_model.SubjectEntry) -> transcript_model.SubjectRollup:
    tests = tuple(rollup_test(t) for t in subject.tests)
    return transcript_model.SubjectRollup(
        name=subject.name, required=subject.required,
        outcome=combine_outcomes(_required_outcomes(tests)), tests=tests,
    )

def rollup_block(block: transcript_model.BlockEntry) -> transcript_model.BlockRollup:
    subjects = tuple(rollup_subject(s) for s in block.subjects)
    return transcript_model.BlockRollup(
        name=block.name, required=block.required,
        outcome=combine_outcomes(_required_outcomes(subjects)), subjects=subjects,
    )

def rollup_transcript(blocks: Sequence[transcript_model.BlockEntry], student_id: Optional[str] = None) -> transcript_model.TranscriptRollup:
    rolled = tuple(rollup_block(b) for b in blocks)
    return transcript_model.TranscriptRollup(
        student_id=student_id,
        outcome=combine_outcomes(_required_outcomes(rolled)),
        blocks=rolled,
    )
