# /gradeflow/routers/tasks_router.py

from fastapi import APIRouter, Depends, status
from typing import List, Optional

from ..models import task_model
from ..services import task_service
from ..services.database_service import DatabaseService, get_db_service
from .dependencies import get_actor_id

router = APIRouter()

# --- TASK COLLECTION ENDPOINTS (/api/tasks) ---

@router.get("", response_model=List[task_model.Task], summary="List Tasks")
def get_all_tasks(
    task_status: Optional[task_model.TaskStatus] = None,
    test_id: Optional[str] = None,
    user_id: Optional[str] = None,
    db: DatabaseService = Depends(get_db_service),
):
    return task_service.list_tasks(db=db, task_status=task_status, test_id=test_id, user_id=user_id)

@router.post("", response_model=task_model.Task, status_code=status.HTTP_201_CREATED, summary="Create a Task")
def create_task(
    task_create: task_model.TaskCreate,
    db: DatabaseService = Depends(get_db_service),
    actor_id: str = Depends(get_actor_id),
):
    return task_service.create_task(task_data=task_create, db=db, user_id=actor_id)

# --- INDIVIDUAL TASK ENDPOINTS (/api/tasks/{task_id}) ---

@router.get("/{task_id}", response_model=task_model.Task, summary="Get a Single Task")
def get_task(task_id: str, db: DatabaseService = Depends(get_db_service)):
    return task_service.get_task(task_id=task_id, db=db)

@router.put("/{task_id}", response_model=task_model.Task, summary="Update a Task")
def update_task(
    task_id: str,
    task_update: task_model.TaskUpdate,
    db: DatabaseService = Depends(get_db_service),
    actor_id: str = Depends(get_actor_id),
):
    return task_service.update_task(task_id=task_id, task_update=task_update, db=db, user_id=actor_id)

@router.delete("/{task_id}", response_model=task_model.Task, summary="Delete a Task")
def delete_task(task_id: str, db: DatabaseService = Depends(get_db_service), actor_id: str = Depends(get_actor_id)):
    return task_service.delete_task(task_id=task_id, db=db, user_id=actor_id)

# --- LIFECYCLE TRANSITIONS ---

@router.post("/{task_id}/assign-corrector", response_model=task_model.AssignCorrectorResponse, summary="Assign a Corrector")
def assign_corrector(
    task_id: str,
    request: task_model.AssignCorrectorRequest,
    db: DatabaseService = Depends(get_db_service),
    actor_id: str = Depends(get_actor_id),
):
    return task_service.assign_corrector(task_id=task_id, request=request, db=db, user_id=actor_id)

@router.post("/{task_id}/enter-marks", response_model=task_model.EnterMarksResponse, summary="Enter a Student's Marks")
def enter_marks(
    task_id: str,
    request: task_model.EnterMarksRequest,
    db: DatabaseService = Depends(get_db_service),
    actor_id: str = Depends(get_actor_id),
):
    return task_service.enter_marks(task_id=task_id, request=request, db=db, user_id=actor_id)

@router.post("/{task_id}/validate-marks", response_model=task_model.ValidateMarksResponse, summary="Validate Entered Marks")
def validate_marks(
    task_id: str,
    request: task_model.ValidateMarksRequest,
    db: DatabaseService = Depends(get_db_service),
    actor_id: str = Depends(get_actor_id),
):
    return task_service.validate_marks(task_id=task_id, request=request, db=db, user_id=actor_id)
