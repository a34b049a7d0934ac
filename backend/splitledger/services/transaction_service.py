"""
Activity feed of a group: expenses and settlements in one list.
"""
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from splitledger.models.expense import Expense
from splitledger.models.settlement import Settlement
from splitledger.models.user import User
from splitledger.services.settlement_service import UNKNOWN_USER


def get_group_transactions(group_id: int, db: Session) -> List[Dict[str, Any]]:
    """Expenses and settlements of a group, newest first."""
    expenses = db.query(Expense).filter(Expense.group_id == group_id).all()
    settlements = db.query(Settlement).filter(Settlement.group_id == group_id).all()

    user_ids = {e.paid_by_id for e in expenses}
    for s in settlements:
        user_ids.update((s.from_user_id, s.to_user_id))

    user_map = {}
    if user_ids:
        users = db.query(User).filter(User.id.in_(user_ids)).all()
        user_map = {u.id: {"id": u.id, "name": u.name} for u in users}

    def user_ref(user_id):
        return user_map.get(user_id, {"id": user_id, "name": UNKNOWN_USER})

    transactions = []
    for expense in expenses:
        transactions.append({
            "id": expense.id,
            "type": "expense",
            "description": expense.description,
            "amount": expense.amount,
            "paid_by": user_ref(expense.paid_by_id),
            "category": expense.category,
            "created_at": expense.created_at
        })

    for settlement in settlements:
        from_user = user_ref(settlement.from_user_id)
        to_user = user_ref(settlement.to_user_id)
        transactions.append({
            "id": settlement.id,
            "type": "settlement",
            "description": f"{from_user['name']} paid {to_user['name']}",
            "amount": settlement.amount,
            "from_user": from_user,
            "to_user": to_user,
            "created_at": settlement.created_at
        })

    # Type and id break ties between entries created in the same instant
    transactions.sort(key=lambda t: (t["created_at"], t["type"], t["id"]), reverse=True)
    return transactions
