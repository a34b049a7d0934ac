"""
Case-insensitive search over groups, users and expenses.
"""
from typing import Dict, List

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from splitledger.models.expense import Expense
from splitledger.models.group import Group
from splitledger.models.user import User
from splitledger.services.settlement_service import UNKNOWN_USER

MIN_QUERY_LENGTH = 2
RESULTS_PER_TYPE = 5


def search(query: str, db: Session) -> List[Dict]:
    """
    Find groups by name or join code, users by name or email, and expenses
    by description, at most five of each.

    Queries shorter than two characters return nothing.
    """
    query = (query or "").strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []

    groups = db.query(Group).filter(
        or_(Group.name.icontains(query, autoescape=True), Group.join_code.icontains(query, autoescape=True))
    ).order_by(Group.id).limit(RESULTS_PER_TYPE).all()

    users = db.query(User).filter(
        or_(User.name.icontains(query, autoescape=True), User.email.icontains(query, autoescape=True))
    ).order_by(User.id).limit(RESULTS_PER_TYPE).all()

    expenses = db.query(Expense).options(joinedload(Expense.payer)).filter(
        Expense.description.icontains(query, autoescape=True)
    ).order_by(Expense.created_at.desc(), Expense.id.desc()).limit(RESULTS_PER_TYPE).all()

    results = []
    for group in groups:
        results.append({
            "type": "group",
            "id": group.id,
            "title": group.name,
            "subtitle": f"Code: {group.join_code}" if group.join_code else None
        })
    for user in users:
        results.append({"type": "user", "id": user.id, "title": user.name, "subtitle": user.email})
    for expense in expenses:
        payer = expense.payer.name if expense.payer else UNKNOWN_USER
        results.append({
            "type": "expense",
            "id": expense.id,
            "title": expense.description,
            "subtitle": f"{expense.amount} • Paid by {payer}"
        })
    return results
