# /gradeflow/routers/results_router.py

from fastapi import APIRouter, Depends
from typing import List, Optional

from ..models import result_model
from ..services import result_service
from ..services.database_service import DatabaseService, get_db_service
from .dependencies import get_actor_id

router = APIRouter()

# --- RESULT COLLECTION ENDPOINTS (/api/student-test-results) ---

@router.get("", response_model=List[result_model.StudentTestResult], summary="List Student Test Results")
def get_all_results(
    student_test_result_status: Optional[result_model.ResultStatus] = None,
    test_id: Optional[str] = None,
    student_id: Optional[str] = None,
    db: DatabaseService = Depends(get_db_service),
):
    return result_service.list_results(
        db=db, result_status=student_test_result_status, test_id=test_id, student_id=student_id,
    )

# --- INDIVIDUAL RESULT ENDPOINTS (/api/student-test-results/{result_id}) ---

@router.get("/{result_id}", response_model=result_model.StudentTestResult, summary="Get a Single Student Test Result")
def get_result(result_id: str, db: DatabaseService = Depends(get_db_service)):
    return result_service.get_result(result_id=result_id, db=db)

@router.put("/{result_id}", response_model=result_model.StudentTestResult, summary="Correct a Pending Result's Marks")
def update_result(
    result_id: str,
    result_update: result_model.UpdateStudentTestResultInput,
    db: DatabaseService = Depends(get_db_service),
    actor_id: str = Depends(get_actor_id),
):
    return result_service.update_result(result_id=result_id, result_update=result_update, db=db, user_id=actor_id)

@router.delete("/{result_id}", response_model=result_model.StudentTestResult, summary="Delete a Pending Result")
def delete_result(result_id: str, db: DatabaseService = Depends(get_db_service), actor_id: str = Depends(get_actor_id)):
    return result_service.delete_result(result_id=result_id, db=db, user_id=actor_id)
