# /gradeflow/services/database_helpers/result_repository_sql.py

import logging
from typing import List, Optional, Sequence
from sqlalchemy.orm import Session

from gradeflow.db.models.result_models import StudentTestResult
from gradeflow.models import result_model
from ..errors import StateConflict
from .task_repository_sql import column_values

logger = logging.getLogger(__name__)

class ResultRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def get_result(self, result_id: str) -> Optional[StudentTestResult]:
        return self.db.query(StudentTestResult).filter(StudentTestResult.id == result_id).first()

    def get_results(
        self,
        result_status: Optional[str] = None,
        test_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> List[StudentTestResult]:
        """Lists results that have not been deleted, most recently entered first."""
        query = self.db.query(StudentTestResult).filter(StudentTestResult.deleted_at.is_(None))
        if result_status:
            query = query.filter(StudentTestResult.student_test_result_status == result_status)
        if test_id:
            query = query.filter(StudentTestResult.test == test_id)
        if student_id:
            query = query.filter(StudentTestResult.student == student_id)
        return query.order_by(StudentTestResult.mark_entry_date.desc()).all()

    def get_result_for_student(self, test_id: str, student_id: str) -> Optional[StudentTestResult]:
        """The single result a student has for a test, if marks were entered. Deleted results still count."""
        return (
            self.db.query(StudentTestResult)
            .filter(StudentTestResult.test == test_id, StudentTestResult.student == student_id)
            .first()
        )

    def get_results_for_student(self, student_id: str, test_ids: Sequence[str]) -> List[StudentTestResult]:
        if not test_ids:
            return []
        return (
            self.db.query(StudentTestResult)
            .filter(
                StudentTestResult.student == student_id,
                StudentTestResult.test.in_(list(test_ids)),
                StudentTestResult.deleted_at.is_(None),
            )
            .all()
        )

    def save_result_change(self, result: result_model.StudentTestResult, expected_status: result_model.ResultStatus) -> None:
        """
        Writes a changed result back, provided the stored row is still live and
        in `expected_status`. Raises `StateConflict` otherwise.
        """
        try:
            updated = (
                self.db.query(StudentTestResult)
                .filter(
                    StudentTestResult.id == result.id,
                    StudentTestResult.student_test_result_status == expected_status.value,
                    StudentTestResult.deleted_at.is_(None),
                )
                .update(column_values(result, exclude={"id"}), synchronize_session=False)
            )
            if updated == 0:
                raise StateConflict(
                    f"Result {result.id} is no longer {expected_status.value}; the change was not applied.",
                    field="student_test_result_status",
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
