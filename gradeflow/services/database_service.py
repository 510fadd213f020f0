# /gradeflow/services/database_service.py

from typing import List, Dict, Optional, Generator, Sequence
from sqlalchemy.orm import Session
from fastapi import Depends

# --- Core Database Setup ---
from gradeflow.db.database import get_db

# --- Repository Imports ---
from .database_helpers.test_repository_sql import TestRepositorySQL
from .database_helpers.task_repository_sql import TaskRepositorySQL
from .database_helpers.result_repository_sql import ResultRepositorySQL
from ..models import effect_model


class DatabaseService:
    def __init__(self, db_session: Session):
        """Facade over the SQL repositories. All of them share one session."""
        if db_session is None:
            raise ValueError("A database session is required.")
        self.test_repo = TestRepositorySQL(db_session)
        self.task_repo = TaskRepositorySQL(db_session)
        self.result_repo = ResultRepositorySQL(db_session)

    # --- TEST METHODS (DELEGATED) ---
    def add_test(self, test_record: Dict): return self.test_repo.add_test(test_record)
    def get_test(self, test_id: str): return self.test_repo.get_test(test_id)
    def update_test(self, test_id: str, update_data: Dict): return self.test_repo.update_test(test_id, update_data)

    # --- TASK METHODS (DELEGATED) ---
    def get_task(self, task_id: str): return self.task_repo.get_task(task_id)
    def get_tasks(self, task_status: Optional[str] = None, test_id: Optional[str] = None, user_id: Optional[str] = None) -> List:
        return self.task_repo.get_tasks(task_status=task_status, test_id=test_id, user_id=user_id)
    def commit_transition(self, outcome: effect_model.TransitionOutcome) -> List[effect_model.NotificationEffect]:
        return self.task_repo.commit_transition(outcome)

    # --- STUDENT TEST RESULT METHODS (DELEGATED) ---
    def get_result(self, result_id: str): return self.result_repo.get_result(result_id)
    def get_results(self, result_status: Optional[str] = None, test_id: Optional[str] = None, student_id: Optional[str] = None) -> List:
        return self.result_repo.get_results(result_status=result_status, test_id=test_id, student_id=student_id)
    def get_result_for_student(self, test_id: str, student_id: str): return self.result_repo.get_result_for_student(test_id, student_id)
    def get_results_for_student(self, student_id: str, test_ids: Sequence[str]) -> List:
        return self.result_repo.get_results_for_student(student_id, test_ids)
    def save_result_change(self, result, expected_status): return self.result_repo.save_result_change(result, expected_status)


def get_db_service(db: Session = Depends(get_db)) -> Generator[DatabaseService, None, None]:
    """FastAPI dependency that provides a DatabaseService bound to the request's session."""
    yield DatabaseService(db_session=db)
