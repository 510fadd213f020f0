# /tests/test_rollup.py

import pytest

from gradeflow.models import test_model, transcript_model
from gradeflow.services import grading_service
from gradeflow.services.grading_helpers import rollup
from gradeflow.services.grading_helpers.criteria_validator import validate_passing_criteria

from conftest import NOTATIONS, CRITERIA

PASS = test_model.TestOutcome.PASS
FAIL = test_model.TestOutcome.FAIL
INDETERMINATE = test_model.TestOutcome.INDETERMINATE

PASSING_MARKS = [{"notation_text": "A", "mark": 12}, {"notation_text": "B", "mark": 8}]
FAILING_MARKS = [{"notation_text": "A", "mark": 3}, {"notation_text": "B", "mark": 15}]
UNDECIDED_MARKS = [{"notation_text": "A", "mark": 6}, {"notation_text": "B", "mark": 6}]


def _entry(test_id, marks, required=True):
    return transcript_model.TestEntry(
        test_id=test_id,
        required=required,
        test_passing_criteria=validate_passing_criteria(CRITERIA, NOTATIONS),
        marks=marks,
    )


def _subject(name, *tests, required=True):
    return transcript_model.SubjectEntry(name=name, required=required, tests=tests)


# --- Outcome Combination ---

@pytest.mark.parametrize("outcomes, expected", [
    ([PASS, PASS, PASS], PASS),
    ([PASS, FAIL, PASS], FAIL),
    ([PASS, INDETERMINATE], INDETERMINATE),
    ([INDETERMINATE, FAIL], FAIL),
    ([INDETERMINATE], INDETERMINATE),
    ([], PASS),
])
def test_combine_outcomes(outcomes, expected):
    assert rollup.combine_outcomes(outcomes) == expected


# --- Hierarchy ---

def test_test_without_marks_is_indeterminate():
    rolled = rollup.rollup_test(_entry("t1", None))
    assert rolled.outcome == INDETERMINATE
    assert rolled.average_mark is None


def test_test_rollup_reuses_single_test_classification():
    rolled = rollup.rollup_test(_entry("t1", FAILING_MARKS))
    assert rolled.average_mark == 9.0
    assert rolled.outcome == FAIL


def test_subject_passes_when_every_required_test_passes():
    subject = rollup.rollup_subject(_subject("Maths", _entry("t1", PASSING_MARKS), _entry("t2", PASSING_MARKS)))
    assert subject.outcome == PASS
    assert [t.outcome for t in subject.tests] == [PASS, PASS]


def test_optional_children_are_reported_but_ignored():
    subject = rollup.rollup_subject(_subject(
        "Maths",
        _entry("t1", PASSING_MARKS),
        _entry("t_bonus", FAILING_MARKS, required=False),
    ))
    assert subject.outcome == PASS
    assert subject.tests[1].outcome == FAIL
    assert subject.tests[1].required is False


def test_failure_propagates_to_the_transcript():
    """
    GIVEN one failed test in a required subject of a required block
    WHEN the transcript is rolled up
    THEN the subject, its block and the transcript all FAIL.
    """
    blocks = [
        transcript_model.BlockEntry(name="Year 1", subjects=(
            _subject("Maths", _entry("t1", PASSING_MARKS), _entry("t2", FAILING_MARKS)),
            _subject("Physics", _entry("t3", PASSING_MARKS)),
        )),
        transcript_model.BlockEntry(name="Year 2", subjects=(_subject("Chemistry", _entry("t4", PASSING_MARKS)),)),
    ]

    transcript = grading_service.rollup_transcript(blocks, student_id="student_1")

    assert transcript.student_id == "student_1"
    assert transcript.outcome == FAIL
    assert transcript.blocks[0].outcome == FAIL
    assert transcript.blocks[0].subjects[0].outcome == FAIL
    assert transcript.blocks[0].subjects[1].outcome == PASS
    assert transcript.blocks[1].outcome == PASS


def test_pending_test_keeps_transcript_indeterminate():
    blocks = [transcript_model.BlockEntry(name="Year 1", subjects=(
        _subject("Maths", _entry("t1", PASSING_MARKS), _entry("t2", None)),
    ))]
    assert rollup.rollup_transcript(blocks).outcome == INDETERMINATE


def test_undecided_test_keeps_subject_indeterminate():
    subject = rollup.rollup_subject(_subject("Maths", _entry("t1", UNDECIDED_MARKS), _entry("t2", PASSING_MARKS)))
    assert subject.outcome == INDETERMINATE


def test_optional_block_does_not_affect_transcript():
    blocks = [
        transcript_model.BlockEntry(name="Core", subjects=(_subject("Maths", _entry("t1", PASSING_MARKS)),)),
        transcript_model.BlockEntry(name="Electives", required=False,
                                    subjects=(_subject("Art", _entry("t2", FAILING_MARKS)),)),
    ]
    transcript = rollup.rollup_transcript(blocks)
    assert transcript.outcome == PASS
    assert transcript.blocks[1].outcome == FAIL


def test_subject_without_required_tests_passes():
    subject = rollup.rollup_subject(_subject("Maths", _entry("t1", FAILING_MARKS, required=False)))
    assert subject.outcome == PASS
    assert subject.tests[0].outcome == FAIL


def test_block_whose_subject_has_only_optional_tests_passes():
    blocks = [transcript_model.BlockEntry(name="Electives", subjects=(
        _subject("Art", _entry("t1", None, required=False), _entry("t2", UNDECIDED_MARKS, required=False)),
    ))]
    transcript = rollup.rollup_transcript(blocks)
    assert transcript.outcome == PASS
    assert transcript.blocks[0].subjects[0].outcome == PASS
    assert [t.outcome for t in transcript.blocks[0].subjects[0].tests] == [INDETERMINATE, INDETERMINATE]


def test_recorded_outcome_takes_precedence_over_current_criteria():
    entry = _entry("t1", FAILING_MARKS).model_copy(update={"recorded_outcome": PASS})
    rolled = rollup.rollup_test(entry)
    assert rolled.outcome == PASS
    assert rolled.average_mark == 9.0
