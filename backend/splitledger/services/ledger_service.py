"""
Ledger service: builds the pairwise debt graph of a group.

A debt map is a dict keyed by ``(debtor_id, creditor_id)`` tuples whose
values are positive amounts in cents. For any pair of users at most one
direction is present. User ids are treated as opaque keys.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, Mapping, Sequence, Tuple

from sqlalchemy.orm import Session

from splitledger.core.money import to_cents
from splitledger.models.expense import Expense, ExpenseSplit
from splitledger.models.settlement import Settlement

logger = logging.getLogger(__name__)

DebtKey = Tuple[Hashable, Hashable]
DebtMap = Dict[DebtKey, int]


@dataclass
class GroupSnapshot:
    """Records of one group, as read from the repository for a single request."""
    group_id: Hashable
    expenses: List[Expense] = field(default_factory=list)
    splits_by_expense: Dict[Hashable, List[ExpenseSplit]] = field(default_factory=dict)
    settlements: List[Settlement] = field(default_factory=list)


def add_debt(debts: DebtMap, debtor: Hashable, creditor: Hashable, cents: int) -> DebtMap:
    """
    Record that debtor owes creditor `cents`, netting against any reverse edge.
    """
    if cents <= 0 or debtor == creditor:
        return debts

    key = (debtor, creditor)
    reverse_key = (creditor, debtor)

    if reverse_key in debts:
        current = debts[reverse_key]
        if current > cents:
            debts[reverse_key] = current - cents
        elif current < cents:
            del debts[reverse_key]
            debts[key] = cents - current
        else:
            del debts[reverse_key]
    else:
        debts[key] = debts.get(key, 0) + cents

    return debts


def build_pairwise_debts(
    expenses: Iterable[Expense],
    splits_by_expense: Mapping[Hashable, Sequence[ExpenseSplit]]
) -> DebtMap:
    """Turn every non-payer split into a debt towards the expense's payer."""
    debts: DebtMap = {}

    for expense in expenses:
        payer_id = expense.paid_by_id
        for split in splits_by_expense.get(expense.id, []):
            # The payer's own share is already paid for
            if split.user_id == payer_id:
                continue
            add_debt(debts, split.user_id, payer_id, to_cents(split.amount))

    logger.debug(f"Aggregated expenses into {len(debts)} pairwise debts")
    return debts


def apply_settlements(debts: DebtMap, settlements: Iterable[Settlement]) -> DebtMap:
    """
    Fold recorded payments into the debt map (in place) and return it.

    A payment from F to T first pays down what F owes T. Anything beyond
    that debt, or any payment made while F owed T nothing, becomes money T
    now owes F.
    """
    for settlement in settlements:
        from_id = settlement.from_user_id
        to_id = settlement.to_user_id
        cents = to_cents(settlement.amount)
        if from_id == to_id or cents <= 0:
            continue

        key = (from_id, to_id)
        reverse_key = (to_id, from_id)

        if key in debts:
            current = debts[key]
            if current > cents:
                debts[key] = current - cents
            elif current < cents:
                # Over-payment: the excess is now owed back to the payer
                del debts[key]
                debts[reverse_key] = debts.get(reverse_key, 0) + (cents - current)
            else:
                del debts[key]
        else:
            debts[reverse_key] = debts.get(reverse_key, 0) + cents

    return debts


def group_splits(splits: Iterable[ExpenseSplit]) -> Dict[Hashable, List[ExpenseSplit]]:
    """Index splits by the expense they belong to."""
    splits_by_expense: Dict[Hashable, List[ExpenseSplit]] = {}
    for split in splits:
        splits_by_expense.setdefault(split.expense_id, []).append(split)
    return splits_by_expense


def load_group_snapshot(group_id: int, db: Session) -> GroupSnapshot:
    """Read everything the ledger needs for one group."""
    expenses = db.query(Expense).filter(
        Expense.group_id == group_id
    ).order_by(Expense.created_at, Expense.id).all()

    expense_ids = [expense.id for expense in expenses]
    splits = []
    if expense_ids:
        splits = db.query(ExpenseSplit).filter(
            ExpenseSplit.expense_id.in_(expense_ids)
        ).order_by(ExpenseSplit.id).all()

    settlements = db.query(Settlement).filter(
        Settlement.group_id == group_id
    ).order_by(Settlement.created_at, Settlement.id).all()

    return GroupSnapshot(
        group_id=group_id,
        expenses=expenses,
        splits_by_expense=group_splits(splits),
        settlements=settlements
    )
