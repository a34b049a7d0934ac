"""
Split calculation for new expenses.

Turns an expense total plus per-participant input into validated per-user
amounts. Works in cents internally so the shares always add back up to the
expense total.
"""
import logging
from decimal import Decimal
from typing import Hashable, List, Optional, Sequence, Union

from splitledger.core.money import Amount, from_cents, round_cents, to_cents, to_decimal
from splitledger.models.expense import SplitType
from splitledger.schemas.expense import SplitInput

logger = logging.getLogger(__name__)

# Tolerances for caller-supplied totals
EXACT_TOLERANCE_CENTS = 1
PERCENTAGE_TOLERANCE = Decimal("0.01")


class InvalidSplitError(ValueError):
    """Raised when split input cannot produce a valid allocation."""


class CalculatedSplit:
    """Represents the share of an expense owed by one user."""
    def __init__(self, user_id: Hashable, amount: Decimal, percentage: Optional[Decimal] = None):
        self.user_id = user_id
        self.amount = amount
        self.percentage = percentage

    def __repr__(self):
        return f"CalculatedSplit(user_id={self.user_id!r}, amount={self.amount}, percentage={self.percentage})"


def _check_participants(user_ids: Sequence[Hashable]):
    if not user_ids:
        raise InvalidSplitError("At least one participant is required for a split")
    seen = set()
    for user_id in user_ids:
        if user_id in seen:
            raise InvalidSplitError(f"User {user_id} appears more than once in the split")
        seen.add(user_id)


def calculate_equal_split(total_amount: Amount, user_ids: Sequence[Hashable]) -> List[CalculatedSplit]:
    """
    Split the total evenly.

    Each user gets total // n cents; the leftover cents (fewer than n) go to
    the first participant so that the shares sum to the total.
    """
    _check_participants(user_ids)

    total_cents = to_cents(total_amount)
    share, remainder = divmod(total_cents, len(user_ids))

    splits = []
    for index, user_id in enumerate(user_ids):
        cents = share + remainder if index == 0 else share
        splits.append(CalculatedSplit(user_id, from_cents(cents)))
    return splits


def calculate_exact_split(total_amount: Amount, splits: Sequence[SplitInput]) -> List[CalculatedSplit]:
    """Use the amounts supplied per user; they must add up to the total."""
    _check_participants([split.user_id for split in splits])

    total_cents = to_cents(total_amount)
    amounts = [to_cents(split.amount or 0) for split in splits]
    if any(cents < 0 for cents in amounts):
        raise InvalidSplitError("Split amounts cannot be negative")

    split_sum = sum(amounts)
    if abs(split_sum - total_cents) > EXACT_TOLERANCE_CENTS:
        raise InvalidSplitError(
            f"Split amounts ({from_cents(split_sum)}) must equal total amount ({from_cents(total_cents)})"
        )

    return [
        CalculatedSplit(split.user_id, from_cents(cents))
        for split, cents in zip(splits, amounts)
    ]


def _absorb_residual(amounts: List[int], percentages: List[Decimal], residual: int):
    """
    Put the rounding residual on the largest percentages.

    A positive residual goes to the participant with the largest percentage
    (the first of them on a tie). A negative one is taken from the largest
    shares downwards without taking any share below zero.
    """
    order = sorted(range(len(amounts)), key=lambda i: percentages[i], reverse=True)

    if residual >= 0:
        amounts[order[0]] += residual
        return

    for index in order:
        taken = min(amounts[index], -residual)
        amounts[index] -= taken
        residual += taken
        if residual == 0:
            break


def calculate_percentage_split(total_amount: Amount, splits: Sequence[SplitInput]) -> List[CalculatedSplit]:
    """
    Allocate the total by percentage; percentages must add up to 100.

    Amounts are rounded to the cent and the rounding residual is settled on
    the largest percentages, so no share ends up negative.
    """
    _check_participants([split.user_id for split in splits])

    percentages = [Decimal(str(split.percentage or 0)) for split in splits]
    if any(pct < 0 for pct in percentages):
        raise InvalidSplitError("Percentages cannot be negative")

    total_percentage = sum(percentages, Decimal(0))
    if abs(total_percentage - 100) > PERCENTAGE_TOLERANCE:
        raise InvalidSplitError(f"Percentages ({total_percentage}%) must sum to 100%")

    total_cents = to_cents(total_amount)
    amounts = [round_cents(Decimal(total_cents) * pct / 100) for pct in percentages]
    _absorb_residual(amounts, percentages, total_cents - sum(amounts))

    return [
        CalculatedSplit(split.user_id, from_cents(cents), to_decimal(pct))
        for split, cents, pct in zip(splits, amounts, percentages)
    ]


def calculate_split(
    total_amount: Amount,
    split_type: Union[SplitType, str],
    splits: Sequence[SplitInput]
) -> List[CalculatedSplit]:
    """Dispatch to the calculator for the given split type."""
    try:
        split_type = SplitType(split_type)
    except ValueError:
        raise InvalidSplitError(f"Unknown split type: {split_type}")

    if split_type == SplitType.EQUAL:
        result = calculate_equal_split(total_amount, [split.user_id for split in splits])
    elif split_type == SplitType.EXACT:
        result = calculate_exact_split(total_amount, splits)
    else:
        result = calculate_percentage_split(total_amount, splits)

    logger.debug(f"Split {total_amount} {split_type.value} across {len(result)} users")
    return result
