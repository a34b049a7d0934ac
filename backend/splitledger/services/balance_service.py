"""
Balance service for per-user totals across all of a user's groups.
"""
import logging
from decimal import Decimal
from typing import Dict, Hashable, Iterable

from sqlalchemy.orm import Session

from splitledger.core.money import from_cents, to_cents
from splitledger.models.group import GroupMember
from splitledger.services.ledger_service import GroupSnapshot, load_group_snapshot

logger = logging.getLogger(__name__)


def summarize_group(user_id: Hashable, snapshot: GroupSnapshot) -> Dict[str, int]:
    """
    Raw per-group figures for one user, in cents.

    raw_owed: others' shares of expenses the user paid
    raw_owes: the user's shares of expenses others paid
    settled_in / settled_out: payments received / made by the user
    """
    raw_owed = 0
    raw_owes = 0
    for expense in snapshot.expenses:
        splits = snapshot.splits_by_expense.get(expense.id, [])
        if expense.paid_by_id == user_id:
            raw_owed += sum(to_cents(s.amount) for s in splits if s.user_id != user_id)
        else:
            raw_owes += sum(to_cents(s.amount) for s in splits if s.user_id == user_id)

    settled_in = sum(to_cents(s.amount) for s in snapshot.settlements if s.to_user_id == user_id)
    settled_out = sum(to_cents(s.amount) for s in snapshot.settlements if s.from_user_id == user_id)

    return {
        "raw_owed": raw_owed,
        "raw_owes": raw_owes,
        "settled_in": settled_in,
        "settled_out": settled_out,
    }


def summarize_user(user_id: Hashable, snapshots: Iterable[GroupSnapshot]) -> Dict[str, Decimal]:
    """
    Total what a user owes and is owed across groups.

    Within a group, receiving more than others owed you turns the excess into
    something you owe; paying out more than you owed turns the excess into
    something you are owed. This mirrors how over-payments flip a pairwise
    debt in the group ledger.
    """
    total_owes = 0
    total_owed = 0

    for snapshot in snapshots:
        figures = summarize_group(user_id, snapshot)
        net_owed = figures["raw_owed"] - figures["settled_in"]
        net_owes = figures["raw_owes"] - figures["settled_out"]

        if net_owed > 0:
            total_owed += net_owed
        else:
            total_owes += -net_owed

        if net_owes > 0:
            total_owes += net_owes
        else:
            total_owed += -net_owes

    return {
        "total_owes": from_cents(total_owes),
        "total_owed": from_cents(total_owed),
        "net_balance": from_cents(total_owed - total_owes),
    }


def get_user_balance(user_id: int, db: Session) -> Dict[str, Decimal]:
    """Summarize a user over every group they are a member of."""
    memberships = db.query(GroupMember).filter(
        GroupMember.user_id == user_id
    ).order_by(GroupMember.group_id).all()

    snapshots = [load_group_snapshot(m.group_id, db) for m in memberships]
    summary = summarize_user(user_id, snapshots)

    logger.debug(f"User {user_id} balance across {len(snapshots)} groups: {summary['net_balance']}")
    return summary
