"""
Tests for split calculation.
"""
import pytest
from pydantic import ValidationError
from decimal import Decimal
from splitledger.models.expense import SplitType
from splitledger.schemas.expense import SplitInput
from splitledger.services.split_service import (
    InvalidSplitError, calculate_split, calculate_equal_split
)


def amounts(splits):
    return [s.amount for s in splits]


def test_equal_split_even():
    """Test equal split that divides exactly."""
    result = calculate_split(Decimal("300"), SplitType.EQUAL, [SplitInput(user_id=u) for u in (1, 2, 3)])
    assert [s.user_id for s in result] == [1, 2, 3]
    assert amounts(result) == [Decimal("100.00")] * 3
    assert all(s.percentage is None for s in result)


def test_equal_split_remainder_goes_to_first_participant():
    """Test the leftover cent is assigned so shares add up to the total."""
    result = calculate_equal_split(Decimal("100"), [1, 2, 3])
    assert amounts(result) == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
    assert sum(amounts(result)) == Decimal("100.00")


def test_equal_split_ignores_amounts():
    """Test equal split only looks at user ids."""
    splits = [SplitInput(user_id=1, amount=Decimal("5")), SplitInput(user_id=2, amount=Decimal("95"))]
    result = calculate_split(Decimal("10"), "EQUAL", splits)
    assert amounts(result) == [Decimal("5.00"), Decimal("5.00")]


def test_exact_split():
    """Test exact split keeps the given amounts."""
    splits = [
        SplitInput(user_id=1, amount=Decimal("30")),
        SplitInput(user_id=2, amount=Decimal("45.50")),
        SplitInput(user_id=3, amount=Decimal("14.50")),
    ]
    result = calculate_split(Decimal("90"), SplitType.EXACT, splits)
    assert amounts(result) == [Decimal("30.00"), Decimal("45.50"), Decimal("14.50")]


def test_exact_split_mismatch_fails():
    """Test exact amounts summing to 89 cannot cover an expense of 90."""
    splits = [
        SplitInput(user_id=1, amount=Decimal("30")),
        SplitInput(user_id=2, amount=Decimal("30")),
        SplitInput(user_id=3, amount=Decimal("29")),
    ]
    with pytest.raises(InvalidSplitError) as exc_info:
        calculate_split(Decimal("90"), SplitType.EXACT, splits)
    assert "89.00" in str(exc_info.value)
    assert "90.00" in str(exc_info.value)


def test_exact_split_within_one_cent_is_accepted():
    """Test a one cent difference is tolerated."""
    splits = [SplitInput(user_id=1, amount=Decimal("50")), SplitInput(user_id=2, amount=Decimal("49.99"))]
    result = calculate_split(Decimal("100"), SplitType.EXACT, splits)
    assert amounts(result) == [Decimal("50.00"), Decimal("49.99")]


def test_percentage_split():
    """Test percentage split computes amounts and keeps percentages."""
    splits = [
        SplitInput(user_id=1, percentage=Decimal("50")),
        SplitInput(user_id=2, percentage=Decimal("30")),
        SplitInput(user_id=3, percentage=Decimal("20")),
    ]
    result = calculate_split(Decimal("200"), SplitType.PERCENTAGE, splits)
    assert amounts(result) == [Decimal("100.00"), Decimal("60.00"), Decimal("40.00")]
    assert [s.percentage for s in result] == [Decimal("50.00"), Decimal("30.00"), Decimal("20.00")]


def test_percentage_split_rounding_residual():
    """Test rounded percentage amounts still add up to the total."""
    splits = [SplitInput(user_id=u, percentage=Decimal("33.333")) for u in (1, 2, 3)]
    result = calculate_split(Decimal("10"), SplitType.PERCENTAGE, splits)
    assert amounts(result) == [Decimal("3.34"), Decimal("3.33"), Decimal("3.33")]
    assert sum(amounts(result)) == Decimal("10.00")


def test_percentage_split_over_100_fails():
    """Test percentages of 50, 50 and 1 are rejected."""
    splits = [
        SplitInput(user_id=1, percentage=Decimal("50")),
        SplitInput(user_id=2, percentage=Decimal("50")),
        SplitInput(user_id=3, percentage=Decimal("1")),
    ]
    with pytest.raises(InvalidSplitError, match="must sum to 100%"):
        calculate_split(Decimal("100"), SplitType.PERCENTAGE, splits)


def test_percentage_missing_value_counts_as_zero():
    """Test a participant without a percentage owes nothing."""
    splits = [SplitInput(user_id=1, percentage=Decimal("100")), SplitInput(user_id=2)]
    result = calculate_split(Decimal("40"), SplitType.PERCENTAGE, splits)
    assert amounts(result) == [Decimal("40.00"), Decimal("0.00")]


@pytest.mark.parametrize("split_type", ["EQUAL", "EXACT", "PERCENTAGE"])
def test_empty_participants_fail(split_type):
    """Test every split type needs at least one participant."""
    with pytest.raises(InvalidSplitError, match="At least one participant"):
        calculate_split(Decimal("10"), split_type, [])


def test_duplicate_participant_fails():
    """Test a user can only appear once per expense."""
    with pytest.raises(InvalidSplitError, match="more than once"):
        calculate_split(Decimal("10"), SplitType.EQUAL, [SplitInput(user_id=1), SplitInput(user_id=1)])


def test_unknown_split_type_fails():
    """Test unrecognised split types are rejected."""
    with pytest.raises(InvalidSplitError, match="Unknown split type"):
        calculate_split(Decimal("10"), "SHARES", [SplitInput(user_id=1)])


def test_invalid_split_error_is_value_error():
    """Test callers catching ValueError also see split errors."""
    with pytest.raises(ValueError):
        calculate_split(Decimal("10"), SplitType.EXACT, [SplitInput(user_id=1, amount=Decimal("1"))])


def test_percentage_split_residual_never_goes_negative():
    """Test a zero percentage participant does not absorb a negative rounding residual."""
    percentages = ["0", "0.5", "0.5", "99"]
    splits = [SplitInput(user_id=u, percentage=Decimal(p)) for u, p in zip((1, 2, 3, 4), percentages)]
    result = calculate_split(Decimal("1.00"), SplitType.PERCENTAGE, splits)
    assert amounts(result) == [Decimal("0.00"), Decimal("0.01"), Decimal("0.01"), Decimal("0.98")]
    assert sum(amounts(result)) == Decimal("1.00")


def test_percentage_split_residual_goes_to_largest_percentage():
    """Test a positive residual is given to the biggest share, not the first one."""
    splits = [
        SplitInput(user_id=1, percentage=Decimal("33.333")),
        SplitInput(user_id=2, percentage=Decimal("33.334")),
        SplitInput(user_id=3, percentage=Decimal("33.333")),
    ]
    result = calculate_split(Decimal("10"), SplitType.PERCENTAGE, splits)
    assert amounts(result) == [Decimal("3.33"), Decimal("3.34"), Decimal("3.33")]


def test_percentage_split_small_total_has_no_negative_share():
    """Test a negative residual larger than one share is spread over the largest ones."""
    percentages = ["16.67", "16.67", "16.67", "16.67", "16.66", "16.66"]
    splits = [SplitInput(user_id=u, percentage=Decimal(p)) for u, p in enumerate(percentages, start=1)]
    result = calculate_split(Decimal("0.03"), SplitType.PERCENTAGE, splits)
    assert all(amount >= 0 for amount in amounts(result))
    assert sum(amounts(result)) == Decimal("0.03")


def test_exact_split_negative_amount_fails():
    """Test a negative share cannot balance out an inflated one."""
    splits = [
        SplitInput.model_construct(user_id=2, amount=Decimal("-50"), percentage=None),
        SplitInput.model_construct(user_id=3, amount=Decimal("150"), percentage=None),
    ]
    with pytest.raises(InvalidSplitError, match="cannot be negative"):
        calculate_split(Decimal("100"), SplitType.EXACT, splits)


def test_percentage_split_negative_percentage_fails():
    """Test percentages below zero are rejected even when they sum to 100."""
    splits = [
        SplitInput.model_construct(user_id=1, amount=None, percentage=Decimal("-10")),
        SplitInput.model_construct(user_id=2, amount=None, percentage=Decimal("110")),
    ]
    with pytest.raises(InvalidSplitError, match="cannot be negative"):
        calculate_split(Decimal("100"), SplitType.PERCENTAGE, splits)


def test_split_input_rejects_negative_values():
    """Test negative amounts and percentages fail schema validation."""
    with pytest.raises(ValidationError):
        SplitInput(user_id=1, amount=Decimal("-0.01"))
    with pytest.raises(ValidationError):
        SplitInput(user_id=1, percentage=Decimal("-5"))
