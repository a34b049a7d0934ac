"""
Spending statistics of a user, built from their expense splits.
"""
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from splitledger.models.expense import Expense, ExpenseSplit
from splitledger.models.group import Group

STATS_MONTHS = 6
TOP_GROUPS = 5
DEFAULT_CATEGORY = "other"


def _shift_month(year: int, month: int, offset: int):
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def _ranked(totals: Dict[str, Decimal], limit: Optional[int] = None) -> List[Dict]:
    # Largest first; equal totals are ordered by name
    items = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    if limit is not None:
        items = items[:limit]
    return [{"name": name, "value": value} for name, value in items]


def get_user_stats(user_id: int, db: Session, today: Optional[date] = None) -> Dict[str, List[Dict]]:
    """
    Summarise what a user has spent over the last six months.

    Spending is the user's own share of each expense (their split amount),
    whoever paid it. Returns:
        monthly: one entry per month, oldest first, ending with the current month
        by_group: the five groups with the highest spending
        by_category: spending per expense category, uncategorised as "other"
    """
    today = today or datetime.utcnow().date()
    months = [_shift_month(today.year, today.month, -offset) for offset in range(STATS_MONTHS - 1, -1, -1)]
    start_year, start_month = months[0]
    since = datetime(start_year, start_month, 1)

    rows = db.query(ExpenseSplit.amount, Expense.created_at, Expense.category, Group.name).join(
        Expense, ExpenseSplit.expense_id == Expense.id
    ).join(
        Group, Expense.group_id == Group.id
    ).filter(
        ExpenseSplit.user_id == user_id,
        Expense.created_at >= since
    ).all()

    by_month = defaultdict(Decimal)
    by_group = defaultdict(Decimal)
    by_category = defaultdict(Decimal)

    for amount, created_at, category, group_name in rows:
        by_month[(created_at.year, created_at.month)] += amount
        by_group[group_name] += amount
        by_category[category or DEFAULT_CATEGORY] += amount

    monthly = [
        {"name": date(year, month, 1).strftime("%b"), "value": by_month.get((year, month), Decimal("0.00"))}
        for year, month in months
    ]

    return {
        "monthly": monthly,
        "by_group": _ranked(by_group, TOP_GROUPS),
        "by_category": _ranked(by_category)
    }
