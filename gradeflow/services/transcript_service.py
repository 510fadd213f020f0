# /gradeflow/services/transcript_service.py

"""
Builds a student's transcript rollup from stored tests and results.

Only VALIDATED results count towards the transcript. A test whose result is
missing, deleted or still awaiting validation is reported as INDETERMINATE.
A validated result keeps the outcome recorded when its marks were entered,
even if the test's criteria were edited afterwards.
"""

from typing import Dict, List

from ..models import test_model, result_model, transcript_model
from .database_service import DatabaseService
from .errors import NotFound
from .grading_helpers import rollup


def _collect_test_ids(request: transcript_model.TranscriptRequest) -> List[str]:
    test_ids = []
    for block in request.blocks:
        for subject in block.subjects:
            for test_id in (*subject.test_ids, *subject.optional_test_ids):
                if test_id not in test_ids:
                    test_ids.append(test_id)
    return test_ids


def _test_entry(test: test_model.TestDefinition, result, required: bool) -> transcript_model.TestEntry:
    marks, recorded_outcome = None, None
    if result is not None and result.student_test_result_status == result_model.ResultStatus.VALIDATED:
        marks, recorded_outcome = result.marks, result.test_outcome
    return transcript_model.TestEntry(
        test_id=test.id,
        name=test.name,
        required=required,
        test_passing_criteria=test.test_passing_criteria,
        marks=marks,
        recorded_outcome=recorded_outcome,
    )


def build_transcript(request: transcript_model.TranscriptRequest, db: DatabaseService) -> transcript_model.TranscriptRollup:
    test_ids = _collect_test_ids(request)

    tests: Dict[str, test_model.TestDefinition] = {}
    for test_id in test_ids:
        test = db.get_test(test_id)
        if test is None:
            raise NotFound(f"Test {test_id} not found.", field="test_ids")
        tests[test_id] = test_model.TestDefinition.model_validate(test)

    results = {
        row.test: result_model.StudentTestResult.model_validate(row)
        for row in db.get_results_for_student(request.student_id, test_ids)
    }

    blocks = []
    for block in request.blocks:
        subjects = []
        for subject in block.subjects:
            entries = [_test_entry(tests[t], results.get(t), required=True) for t in subject.test_ids]
            entries += [_test_entry(tests[t], results.get(t), required=False) for t in subject.optional_test_ids]
            subjects.append(transcript_model.SubjectEntry(name=subject.name, required=subject.required, tests=tuple(entries)))
        blocks.append(transcript_model.BlockEntry(name=block.name, required=block.required, subjects=tuple(subjects)))

    return rollup.rollup_transcript(blocks, student_id=request.student_id)
