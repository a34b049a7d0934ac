"""
Settlement service: debt simplification and recorded payments.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Hashable, List, Mapping, Tuple

from sqlalchemy.orm import Session

from splitledger.core.money import from_cents
from splitledger.models.settlement import Settlement
from splitledger.models.user import User
from splitledger.services.ledger_service import (
    DebtMap, apply_settlements, build_pairwise_debts, load_group_snapshot
)

logger = logging.getLogger(__name__)

UNKNOWN_USER = "Unknown"


class Transfer:
    """Represents a single transfer between users."""
    def __init__(self, from_user_id: Hashable, to_user_id: Hashable, amount: Decimal):
        self.from_user_id = from_user_id
        self.to_user_id = to_user_id
        self.amount = amount

    def __eq__(self, other):
        if not isinstance(other, Transfer):
            return NotImplemented
        return (self.from_user_id, self.to_user_id, self.amount) == \
            (other.from_user_id, other.to_user_id, other.amount)

    def __repr__(self):
        return f"Transfer({self.from_user_id!r} -> {self.to_user_id!r}: {self.amount})"


def net_positions(debts: DebtMap) -> Dict[Hashable, int]:
    """
    Collapse a debt map to one signed amount (cents) per user.
    Positive means the user is owed money, negative means they owe.
    """
    balances: Dict[Hashable, int] = {}
    for (debtor, creditor), cents in debts.items():
        if cents < 1:
            continue
        balances[debtor] = balances.get(debtor, 0) - cents
        balances[creditor] = balances.get(creditor, 0) + cents
    return balances


def minimize_transfers(balances: List[Tuple[Hashable, int]]) -> List[Transfer]:
    """
    Minimize the number of transfers needed to settle debts.
    Uses a greedy algorithm: the largest debtor pays the largest creditor
    until one of them is square. Produces at most n - 1 transfers.

    Ties between equal amounts keep the order of `balances`.
    """
    # Separate creditors (positive balance) and debtors (negative balance)
    creditors = [(uid, bal) for uid, bal in balances if bal > 0]
    debtors = [(uid, -bal) for uid, bal in balances if bal < 0]  # Store as positive for easier calculation

    # Sort in descending order; list.sort is stable, also with reverse=True
    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    transfers = []
    cred_idx = 0
    debt_idx = 0

    while cred_idx < len(creditors) and debt_idx < len(debtors):
        creditor_id, cred_amount = creditors[cred_idx]
        debtor_id, debt_amount = debtors[debt_idx]

        # Transfer the minimum of what's owed and what's needed
        transfer_amount = min(cred_amount, debt_amount)
        transfers.append(Transfer(debtor_id, creditor_id, from_cents(transfer_amount)))

        creditors[cred_idx] = (creditor_id, cred_amount - transfer_amount)
        debtors[debt_idx] = (debtor_id, debt_amount - transfer_amount)

        if creditors[cred_idx][1] == 0:
            cred_idx += 1
        if debtors[debt_idx][1] == 0:
            debt_idx += 1

    return transfers


def simplify_debts(debts: DebtMap) -> List[Transfer]:
    """Reduce a pairwise debt map to the fewest transfers with the same net effect."""
    balances = net_positions(debts)
    transfers = minimize_transfers(list(balances.items()))
    logger.debug(f"Simplified {len(debts)} debts between {len(balances)} users into {len(transfers)} transfers")
    return transfers


def describe_transfers(transfers: List[Transfer], user_names: Mapping[Hashable, str]) -> List[Dict[str, Any]]:
    """Attach display names to transfers."""
    return [
        {
            "from_user_id": t.from_user_id,
            "from_username": user_names.get(t.from_user_id, UNKNOWN_USER),
            "to_user_id": t.to_user_id,
            "to_username": user_names.get(t.to_user_id, UNKNOWN_USER),
            "amount": t.amount
        }
        for t in transfers
    ]


def calculate_group_balances(group_id: int, db: Session) -> List[Dict[str, Any]]:
    """
    Calculate who owes whom in a group.
    Aggregates expenses, applies recorded settlements and simplifies the result.
    """
    snapshot = load_group_snapshot(group_id, db)

    debts = build_pairwise_debts(snapshot.expenses, snapshot.splits_by_expense)
    apply_settlements(debts, snapshot.settlements)
    transfers = simplify_debts(debts)

    user_ids = {uid for t in transfers for uid in (t.from_user_id, t.to_user_id)}
    user_map = {}
    if user_ids:
        users = db.query(User).filter(User.id.in_(user_ids)).all()
        user_map = {user.id: user.name for user in users}

    return describe_transfers(transfers, user_map)


def record_settlement(
    group_id: int,
    from_user_id: int,
    to_user_id: int,
    amount: Decimal,
    db: Session
) -> Settlement:
    """Persist a payment from one member to another."""
    settlement = Settlement(
        group_id=group_id,
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        amount=amount
    )
    db.add(settlement)
    db.commit()
    db.refresh(settlement)

    logger.info(f"Recorded settlement {settlement.id}: user {from_user_id} paid user {to_user_id} {amount} in group {group_id}")
    return settlement
