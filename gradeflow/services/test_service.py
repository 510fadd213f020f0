# /gradeflow/services/test_service.py

"""
Business logic for test definitions: creating a test with its notation set
and passing criteria, and partially updating it.

Whenever the notation set changes, the criteria already stored on the test
are re-validated against the new notations, so a criteria tree can never end
up referencing a notation that no longer exists.
"""

import logging
import uuid
from typing import Any, Dict

from ..models import test_model
from .database_service import DatabaseService
from .errors import NotFound, ValidationFailure
from .grading_helpers import test_validator, criteria_validator

logger = logging.getLogger(__name__)


def _to_record(cleaned: Dict[str, Any]) -> Dict[str, Any]:
    """Converts validated models into the JSON documents the Test table stores."""
    record = dict(cleaned)
    if "notations" in record:
        record["notations"] = [n.model_dump() for n in record["notations"]]
    if record.get("test_passing_criteria") is not None:
        record["test_passing_criteria"] = record["test_passing_criteria"].model_dump(mode="json", exclude_none=True)
    return record


def get_test(test_id: str, db: DatabaseService) -> test_model.TestDefinition:
    test = db.get_test(test_id)
    if test is None:
        raise NotFound(f"Test {test_id} not found.", field="test")
    return test_model.TestDefinition.model_validate(test)


def create_test(test_data: test_model.TestCreate, db: DatabaseService) -> test_model.TestDefinition:
    cleaned = test_validator.validate_test_input(test_data.model_dump())
    record = _to_record(cleaned)
    record["id"] = f"test_{uuid.uuid4().hex[:12]}"
    record["tasks"] = []
    new_test = db.add_test(record)
    logger.info("Created test %s with %d notation(s)", new_test.id, len(cleaned["notations"]))
    return test_model.TestDefinition.model_validate(new_test)


def update_test(test_id: str, test_update: test_model.TestUpdate, db: DatabaseService) -> test_model.TestDefinition:
    existing = get_test(test_id, db)
    cleaned = test_validator.validate_test_input(
        test_update.model_dump(exclude_unset=True),
        existing_notations=existing.notations,
        is_update=True,
    )
    if not cleaned:
        raise ValidationFailure("No update data provided.")

    if "notations" in cleaned and "test_passing_criteria" not in cleaned and existing.test_passing_criteria is not None:
        cleaned["test_passing_criteria"] = criteria_validator.validate_passing_criteria(
            existing.test_passing_criteria, cleaned["notations"],
        )

    updated = db.update_test(test_id, _to_record(cleaned))
    return test_model.TestDefinition.model_validate(updated)
