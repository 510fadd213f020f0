# /gradeflow/services/grading_helpers/criteria_validator.py

"""
Structural validation of a test's pass/fail criteria and of entered marks.

Checks run top-down in a fixed order and the first failure wins, so the
reported error is always the outermost problem:

1. at least one of `pass_criteria` / `fail_criteria` is present;
2. every present branch has a non-empty `test_criteria_groups` list;
3. every group has a non-empty `conditions` list;
4. every condition has a valid `criteria_type`, `comparison_operator` and a
   non-negative numeric `mark`;
5. every MARK condition names a notation of the test.

On success the raw input is returned as an immutable `TestPassingCriteria`.
"""

import math
from typing import Any, Dict, Iterable, Mapping, Sequence, Set, Union

from pydantic import BaseModel

from ...models import test_model
from ..errors import ValidationFailure

VALID_CRITERIA_TYPES = [t.value for t in test_model.CriteriaType]
VALID_COMPARISON_OPERATORS = [o.value for o in test_model.ComparisonOperator]

ROOT_PATH = "test_passing_criteria"


# --- Small Predicates ---

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)

def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""

def _is_non_empty_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0

def _field(raw: Any, name: str) -> Any:
    return raw.get(name) if isinstance(raw, Mapping) else getattr(raw, name, None)

def _as_raw(value: Any) -> Any:
    """Pydantic models are flattened so both input shapes follow the same rules."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    return value

def notation_texts(notations: Iterable[Any]) -> Set[str]:
    """The set of notation texts, accepting Notation models or plain mappings."""
    return {_field(n, "notation_text") for n in notations or []}


# --- Criteria Tree ---

def _validate_condition(condition: Any, available: Set[str], path: str) -> test_model.Condition:
    criteria_type = _field(condition, "criteria_type")
    if not isinstance(criteria_type, str) or criteria_type.upper() not in VALID_CRITERIA_TYPES:
        raise ValidationFailure(
            f"Field '{path}.criteria_type' is required and must be one of: {', '.join(VALID_CRITERIA_TYPES)}.",
            field=f"{path}.criteria_type",
        )

    comparison_operator = _field(condition, "comparison_operator")
    if not isinstance(comparison_operator, str) or comparison_operator.upper() not in VALID_COMPARISON_OPERATORS:
        raise ValidationFailure(
            f"Field '{path}.comparison_operator' is required and must be one of: {', '.join(VALID_COMPARISON_OPERATORS)}.",
            field=f"{path}.comparison_operator",
        )

    mark = _field(condition, "mark")
    if not _is_number(mark) or mark < 0:
        raise ValidationFailure(f"Field '{path}.mark' is required and must be a number >= 0.", field=f"{path}.mark")

    notation_text = None
    if criteria_type.upper() == test_model.CriteriaType.MARK.value:
        notation_text = _field(condition, "notation_text")
        if not _is_non_empty_string(notation_text):
            raise ValidationFailure(
                f"Field '{path}.notation_text' is required and must be a non-empty string when 'criteria_type' is 'MARK'.",
                field=f"{path}.notation_text",
            )
        if notation_text not in available:
            raise ValidationFailure(
                f"Value \"{notation_text}\" in '{path}.notation_text' does not match any notation defined for this test.",
                field=f"{path}.notation_text",
            )

    return test_model.Condition(
        criteria_type=criteria_type.upper(),
        comparison_operator=comparison_operator.upper(),
        mark=mark,
        notation_text=notation_text,
    )

def _validate_branch(branch: Any, available: Set[str], path: str) -> test_model.CriteriaBranch:
    groups = _field(branch, "test_criteria_groups")
    if not _is_non_empty_list(groups):
        raise ValidationFailure(f"Field '{path}' must be a non-empty array of criteria groups.", field=path)

    validated_groups = []
    for group_index, group in enumerate(groups):
        group_path = f"{path}[{group_index}]"
        conditions = _field(group, "conditions")
        if not _is_non_empty_list(conditions):
            raise ValidationFailure(f"Field '{group_path}.conditions' must be a non-empty array.", field=f"{group_path}.conditions")

        validated_groups.append(test_model.CriteriaGroup(conditions=tuple(
            _validate_condition(condition, available, f"{group_path}.conditions[{cond_index}]")
            for cond_index, condition in enumerate(conditions)
        )))

    return test_model.CriteriaBranch(test_criteria_groups=tuple(validated_groups))

def validate_passing_criteria(
    criteria: Union[Mapping[str, Any], test_model.TestPassingCriteria],
    notations: Sequence[Any],
) -> test_model.TestPassingCriteria:
    """
    Validates a candidate criteria tree against the authoritative notation set
    and returns it as an immutable model. Raises `ValidationFailure` with the
    offending field path on the first rule that does not hold.
    """
    raw = _as_raw(criteria)
    if not isinstance(raw, Mapping):
        raise ValidationFailure(f"Field '{ROOT_PATH}' must be an object.", field=ROOT_PATH)

    pass_criteria = raw.get("pass_criteria")
    fail_criteria = raw.get("fail_criteria")
    if pass_criteria is None and fail_criteria is None:
        raise ValidationFailure(
            f"Field '{ROOT_PATH}' must contain at least one of 'pass_criteria' or 'fail_criteria'.",
            field=ROOT_PATH,
        )

    available = notation_texts(notations)
    branches: Dict[str, test_model.CriteriaBranch] = {}
    for branch_name, branch in (("pass_criteria", pass_criteria), ("fail_criteria", fail_criteria)):
        if branch is None:
            continue
        branches[branch_name] = _validate_branch(branch, available, f"{ROOT_PATH}.{branch_name}.test_criteria_groups")

    return test_model.TestPassingCriteria(**branches)


# --- Entered Marks ---

def validate_marks_input(marks: Sequence[Any], notations: Sequence[Any], path: str = "enterMarksInput.marks") -> None:
    """
    Checks entered marks against the test's notations: the list is non-empty,
    every mark references a known notation exactly once, and every value lies
    within [0, max_points].
    """
    if not _is_non_empty_list(marks):
        raise ValidationFailure(f"Field '{path}' must be a non-empty array of marks.", field=path)

    max_points_by_text = {_field(n, "notation_text"): _field(n, "max_points") for n in notations or []}
    seen = set()
    for index, entry in enumerate(marks):
        entry_path = f"{path}[{index}]"
        notation_text = _field(entry, "notation_text")
        if notation_text not in max_points_by_text:
            raise ValidationFailure(
                f"Value \"{notation_text}\" in '{entry_path}.notation_text' does not match any notation defined for this test.",
                field=f"{entry_path}.notation_text",
            )
        if notation_text in seen:
            raise ValidationFailure(
                f"Notation \"{notation_text}\" is marked more than once in '{path}'.",
                field=f"{entry_path}.notation_text",
            )
        seen.add(notation_text)

        value = _field(entry, "mark")
        max_points = max_points_by_text[notation_text]
        if not _is_number(value) or not (0 <= value <= max_points):
            raise ValidationFailure(
                f"Field '{entry_path}.mark' must be a number between 0 and {max_points}.",
                field=f"{entry_path}.mark",
            )
