# /gradeflow/routers/tests_router.py

from fastapi import APIRouter, Depends, status

from ..models import test_model
from ..services import test_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

@router.post("", response_model=test_model.TestDefinition, status_code=status.HTTP_201_CREATED, summary="Create a Test")
def create_test(test_create: test_model.TestCreate, db: DatabaseService = Depends(get_db_service)):
    return test_service.create_test(test_data=test_create, db=db)

@router.get("/{test_id}", response_model=test_model.TestDefinition, summary="Get a Single Test")
def get_test(test_id: str, db: DatabaseService = Depends(get_db_service)):
    return test_service.get_test(test_id=test_id, db=db)

@router.put("/{test_id}", response_model=test_model.TestDefinition, summary="Partially Update a Test")
def update_test(test_id: str, test_update: test_model.TestUpdate, db: DatabaseService = Depends(get_db_service)):
    return test_service.update_test(test_id=test_id, test_update=test_update, db=db)
