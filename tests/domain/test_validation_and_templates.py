"""Tests for validation helpers and category templates."""

from decimal import Decimal

import pytest

from src.domain.errors import ValidationError
from src.domain.services.validation import (
    require_amount,
    require_choice,
    require_id,
    require_non_negative,
    require_positive,
    require_text,
)
from src.domain.templates import (
    CATEGORY_TEMPLATES,
    get_category_template_by_id,
    get_category_templates,
)


def test_require_id_strips_and_rejects_blank():
    assert require_id("  abc ", "Event ID") == "abc"
    with pytest.raises(ValidationError, match="Event ID is required"):
        require_id("   ", "Event ID")
    with pytest.raises(ValidationError):
        require_id(None, "Event ID")


def test_require_text_trims():
    assert require_text(" Flowers ", "Expense name") == "Flowers"
    with pytest.raises(ValidationError, match="Expense name is required"):
        require_text("", "Expense name")


def test_amount_helpers():
    assert require_amount("12.50", "Amount") == Decimal("12.50")
    with pytest.raises(ValidationError, match="must be a number"):
        require_amount("abc", "Amount")
    with pytest.raises(ValidationError, match="is required"):
        require_amount(None, "Amount")
    with pytest.raises(ValidationError, match="must be greater than 0"):
        require_positive(Decimal("0"), "Expense amount")
    assert require_non_negative(Decimal("0"), "Budgeted amount") == Decimal("0")
    with pytest.raises(ValidationError, match="cannot be negative"):
        require_non_negative(Decimal("-1"), "Budgeted amount")


@pytest.mark.parametrize(
    "value", ["NaN", "Infinity", "-Infinity", float("nan"), Decimal("NaN")]
)
def test_non_finite_amounts_are_rejected(value):
    with pytest.raises(ValidationError, match="Expense amount must be a number"):
        require_positive(value, "Expense amount")


def test_require_choice_lists_allowed_values():
    assert require_choice("cash", ("cash", "paypal"), "Payment method") == "cash"
    with pytest.raises(ValidationError, match="cash, paypal"):
        require_choice("cheque", ("cash", "paypal"), "Payment method")


def test_templates_fall_back_to_other():
    assert get_category_templates("unknown") == CATEGORY_TEMPLATES["other"]
    wedding = get_category_templates("wedding")
    assert wedding[0].name == "Venue & Reception"


def test_template_lookup_by_id():
    template = get_category_template_by_id("generic-supplies")

    assert template is not None
    assert template.name == "Supplies"
    assert get_category_template_by_id("missing") is None


def test_template_ids_are_unique():
    ids = [
        template.id
        for templates in CATEGORY_TEMPLATES.values()
        for template in templates
    ]

    assert len(ids) == len(set(ids))
