# /gradeflow/models/result_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Tuple
from datetime import datetime
from enum import Enum

from .test_model import TestOutcome

class ResultStatus(str, Enum):
    PENDING = "PENDING"; VALIDATED = "VALIDATED"

class Mark(BaseModel):
    """One entered mark, joined to a notation by its text."""
    model_config = ConfigDict(from_attributes=True, frozen=True)
    notation_text: str
    mark: float

class MarkSummary(BaseModel):
    model_config = ConfigDict(frozen=True)
    average_mark: float
    test_outcome: TestOutcome

class StudentTestResult(BaseModel):
    """
    The marks one student obtained on one test. Created PENDING by the
    EnterMarks transition and moved to VALIDATED by ValidateMarks.
    """
    model_config = ConfigDict(from_attributes=True)
    id: str
    student: str
    test: str
    marks: Tuple[Mark, ...] = ()
    average_mark: float = 0
    test_outcome: TestOutcome = TestOutcome.INDETERMINATE
    mark_entry_date: datetime
    mark_validated_date: Optional[datetime] = None
    student_test_result_status: ResultStatus = ResultStatus.PENDING
    created_by: str
    created_at: datetime
    updated_by: str
    updated_at: datetime
    deleted_by: Optional[str] = None
    deleted_at: Optional[datetime] = None

class EnterMarksInput(BaseModel):
    test: str = Field(..., min_length=1)
    student: str = Field(..., min_length=1)
    marks: Tuple[Mark, ...]

class UpdateStudentTestResultInput(BaseModel):
    marks: Tuple[Mark, ...]
