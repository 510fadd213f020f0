# /gradeflow/models/task_model.py

"""
Pydantic models for grading tasks and for the payloads each lifecycle
transition consumes.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Tuple
from datetime import datetime
from enum import Enum

from .test_model import TestDefinition
from .result_model import StudentTestResult, EnterMarksInput

# --- Core Enumerations ---
class TaskType(str, Enum):
    ASSIGN_CORRECTOR = "ASSIGN_CORRECTOR"
    ENTER_MARKS = "ENTER_MARKS"
    VALIDATE_MARKS = "VALIDATE_MARKS"

class TaskStatus(str, Enum):
    PENDING = "PENDING"; IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"; DELETED = "DELETED"

class TransitionKind(str, Enum):
    ASSIGN_CORRECTOR = "ASSIGN_CORRECTOR"
    ENTER_MARKS = "ENTER_MARKS"
    VALIDATE_MARKS = "VALIDATE_MARKS"
    UPDATE_TASK = "UPDATE_TASK"
    DELETE_TASK = "DELETE_TASK"

# --- Task Resource ---

class Task(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    test: str
    user: str
    title: str
    description: str = ""
    task_type: TaskType
    task_status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[datetime] = None
    # Set if and only if task_status is COMPLETED.
    completed_by: Optional[str] = None
    completed_at: Optional[datetime] = None
    # The task whose completion spawned this one, if any.
    source_task: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_by: str
    updated_at: datetime
    deleted_by: Optional[str] = None
    deleted_at: Optional[datetime] = None

class TaskCreate(BaseModel):
    test: str = Field(..., min_length=1)
    user: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    task_type: TaskType
    due_date: Optional[datetime] = None

class TaskUpdate(BaseModel):
    """Partial update. `task_status` may only move between PENDING and IN_PROGRESS."""
    user: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    task_type: Optional[TaskType] = None
    task_status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None

# --- Transition Payloads ---
# These carry the already-fetched records a transition needs to decide.

class AssignCorrectorPayload(BaseModel):
    corrector_id: str = Field(..., min_length=1)
    test: TestDefinition
    enter_marks_due_date: Optional[datetime] = None
    # Used only to build the notification; no email is built without an address.
    corrector_email: Optional[str] = None
    subject_name: Optional[str] = None
    student_names: Tuple[str, ...] = ()

class EnterMarksPayload(BaseModel):
    enter_marks: EnterMarksInput
    test: TestDefinition
    existing_result: Optional[StudentTestResult] = None
    validate_marks_due_date: Optional[datetime] = None
    # Assignee of the spawned VALIDATE_MARKS task; defaults to the task's creator.
    validator_id: Optional[str] = None

class ValidateMarksPayload(BaseModel):
    student_test_result_id: str
    result: Optional[StudentTestResult] = None

# --- API Contract Models ---

class AssignCorrectorRequest(BaseModel):
    corrector_id: str = Field(..., min_length=1)
    corrector_email: Optional[str] = None
    enter_marks_due_date: Optional[datetime] = None
    subject_name: Optional[str] = None
    student_names: Tuple[str, ...] = ()

class EnterMarksRequest(BaseModel):
    enter_marks_input: EnterMarksInput
    validate_marks_due_date: Optional[datetime] = None
    validator_id: Optional[str] = None

class ValidateMarksRequest(BaseModel):
    student_test_result_id: str = Field(..., min_length=1)

class AssignCorrectorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    task: Task
    enter_marks_task: Task
    notification_recipient: Optional[str] = None

class EnterMarksResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    student_test_result: StudentTestResult
    validate_marks_task: Task

class ValidateMarksResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    student_test_result: StudentTestResult
    validate_marks_task: Task
