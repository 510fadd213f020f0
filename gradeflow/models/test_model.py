# /gradeflow/models/test_model.py

"""
Pydantic models for a test definition: its notation set and its pass/fail
criteria tree.

The criteria tree (branch -> groups -> conditions) is an immutable value tree.
Instances are normally produced by `criteria_validator.validate_passing_criteria`,
which runs the ordered structural checks on the raw input first.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Tuple, Any
from enum import Enum

# --- Core Enumerations ---
class CriteriaType(str, Enum):
    MARK = "MARK"; AVERAGE = "AVERAGE"

class ComparisonOperator(str, Enum):
    GTE = "GTE"; LTE = "LTE"; GT = "GT"; LT = "LT"; E = "E"

class TestStatus(str, Enum):
    ACTIVE = "ACTIVE"; INACTIVE = "INACTIVE"

class TestOutcome(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    INDETERMINATE = "INDETERMINATE"  # Neither branch conclusively satisfied.

# --- Notation Set ---

class Notation(BaseModel):
    """A named, bounded mark component of a test (e.g. "Essay", max 20)."""
    model_config = ConfigDict(from_attributes=True, frozen=True)
    notation_text: str = Field(..., min_length=1)
    max_points: float = Field(..., ge=0)

# --- Criteria Tree ---

class Condition(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)
    criteria_type: CriteriaType
    comparison_operator: ComparisonOperator
    mark: float = Field(..., ge=0)
    # Only meaningful for MARK conditions; AVERAGE compares against the test average.
    notation_text: Optional[str] = None

class CriteriaGroup(BaseModel):
    """Conditions combined with logical AND."""
    model_config = ConfigDict(from_attributes=True, frozen=True)
    conditions: Tuple[Condition, ...] = Field(..., min_length=1)

class CriteriaBranch(BaseModel):
    """Groups combined with logical OR."""
    model_config = ConfigDict(from_attributes=True, frozen=True)
    test_criteria_groups: Tuple[CriteriaGroup, ...] = Field(..., min_length=1)

class TestPassingCriteria(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)
    pass_criteria: Optional[CriteriaBranch] = None
    fail_criteria: Optional[CriteriaBranch] = None

# --- Test Definition ---

class TestDefinition(BaseModel):
    """The engine's view of a stored test."""
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    description: str = ""
    weight: float = Field(default=1.0, ge=0, le=1)
    notations: Tuple[Notation, ...] = ()
    test_passing_criteria: Optional[TestPassingCriteria] = None
    tasks: List[str] = Field(default_factory=list, description="IDs of the tasks attached to this test.")
    test_status: TestStatus = TestStatus.ACTIVE

# --- API Contract Models ---
# Incoming test payloads stay loosely typed so that the ordered validator,
# not Pydantic, decides which error is reported first.

class TestCreate(BaseModel):
    name: Any = None
    description: Any = None
    weight: Any = None
    notations: Any = None
    test_passing_criteria: Any = None
    test_status: Any = None

class TestUpdate(TestCreate):
    """All fields optional; only the supplied ones are validated and applied."""
    pass
