"""Template Field Schemas tests: typed customization values per template type.

Tests cover:
    - Every template type has a model whose attributes match its customizable fields
    - Display fields reject null; optional text fields accept it
    - Unknown keys are rejected
    - Salary ranges keep min at or below max and uppercase the currency
    - Registry validation maps the first pydantic error to a field-level 400
"""

import pytest
from pydantic import ValidationError

from hrms.core.domain_types import TemplateType
from hrms.core.errors import ValidationError as HrmsValidationError
from hrms.core.template_inheritance import DISPLAY_FIELD, TEMPLATE_FIELDS
from hrms.schemas.template_fields import (
    FIELD_MODELS, CompensationBandFields, LeaveTypeFields, PolicyDocumentFields, SalaryRange,
)
from hrms.services.template_registry import validate_values


@pytest.mark.parametrize("template_type", list(TemplateType))
def test_model_fields_match_customizable_fields(template_type):
    assert set(FIELD_MODELS[template_type].model_fields) == set(TEMPLATE_FIELDS[template_type])


@pytest.mark.parametrize("template_type", list(TemplateType))
def test_display_field_rejects_null(template_type):
    with pytest.raises(ValidationError):
        FIELD_MODELS[template_type].model_validate({DISPLAY_FIELD[template_type]: None})


def test_optional_text_accepts_null():
    fields = PolicyDocumentFields.model_validate({"content": None})
    assert fields.model_dump(exclude_unset=True) == {"content": None}


def test_unset_keys_are_not_dumped():
    fields = LeaveTypeFields.model_validate({"is_paid": False})
    assert fields.model_dump(exclude_unset=True) == {"is_paid": False}


def test_unknown_key_rejected():
    with pytest.raises(ValidationError):
        LeaveTypeFields.model_validate({"paid": True})


def test_negative_carry_over_rejected():
    with pytest.raises(ValidationError):
        LeaveTypeFields.model_validate({"carry_over_days": -1})


def test_salary_range_bounds():
    with pytest.raises(ValidationError):
        SalaryRange(min=60000, max=40000)
    band = SalaryRange(min=40000, max=40000, currency="usd")
    assert band.currency == "USD"


def test_salary_range_must_be_a_mapping():
    with pytest.raises(ValidationError):
        CompensationBandFields.model_validate({"salary_range": [1, 2]})


def test_validate_values_reports_offending_field():
    with pytest.raises(HrmsValidationError) as exc_info:
        validate_values(TemplateType.LEAVE_TYPE, {"name": "Sabbatical", "is_paid": "maybe"})
    assert exc_info.value.field == "is_paid"


def test_validate_values_rejects_unknown_field_first():
    with pytest.raises(HrmsValidationError):
        validate_values(TemplateType.SKILL, {"title": "x"})


def test_validate_values_returns_typed_values():
    values = validate_values(TemplateType.ONBOARDING_WORKFLOW, {"timeline_days": "14"})
    assert values == {"timeline_days": 14}
