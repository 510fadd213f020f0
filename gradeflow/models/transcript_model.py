# /gradeflow/models/transcript_model.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Tuple

from .test_model import TestPassingCriteria, TestOutcome
from .result_model import Mark

# --- Rollup Input ---

class TestEntry(BaseModel):
    """One test of a subject, with the student's marks if any were entered."""
    model_config = ConfigDict(from_attributes=True, frozen=True)
    test_id: str
    name: Optional[str] = None
    required: bool = True
    test_passing_criteria: Optional[TestPassingCriteria] = None
    # None means no result exists yet for this student.
    marks: Optional[Tuple[Mark, ...]] = None
    # The classification stored on the result when its marks were entered.
    recorded_outcome: Optional[TestOutcome] = None

class SubjectEntry(BaseModel):
    model_config = ConfigDict(frozen=True)
    name: str
    required: bool = True
    tests: Tuple[TestEntry, ...] = ()

class BlockEntry(BaseModel):
    model_config = ConfigDict(frozen=True)
    name: str
    required: bool = True
    subjects: Tuple[SubjectEntry, ...] = ()

# --- Rollup Output ---

class TestRollup(BaseModel):
    test_id: str
    name: Optional[str] = None
    required: bool = True
    average_mark: Optional[float] = None
    outcome: TestOutcome

class SubjectRollup(BaseModel):
    name: str
    required: bool = True
    outcome: TestOutcome
    tests: Tuple[TestRollup, ...] = ()

class BlockRollup(BaseModel):
    name: str
    required: bool = True
    outcome: TestOutcome
    subjects: Tuple[SubjectRollup, ...] = ()

class TranscriptRollup(BaseModel):
    student_id: Optional[str] = None
    outcome: TestOutcome
    blocks: Tuple[BlockRollup, ...] = ()

# --- API Contract Models ---
# The request names tests by id; their criteria and the student's marks are
# loaded from storage by the transcript service.

class SubjectRequest(BaseModel):
    name: str
    required: bool = True
    test_ids: Tuple[str, ...] = Field(default=())
    optional_test_ids: Tuple[str, ...] = Field(default=(), description="Tests reported but excluded from the rollup.")

class BlockRequest(BaseModel):
    name: str
    required: bool = True
    subjects: Tuple[SubjectRequest, ...] = ()

class TranscriptRequest(BaseModel):
    student_id: str = Field(..., min_length=1)
    blocks: Tuple[BlockRequest, ...] = Field(..., min_length=1)
