"""
Expense service for expense-related business logic.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from splitledger.models.expense import Expense, ExpenseSplit, SplitType
from splitledger.schemas.expense import SplitInput
from splitledger.services.split_service import calculate_split

logger = logging.getLogger(__name__)


def create_expense_with_splits(
    group_id: int,
    paid_by_id: int,
    description: str,
    amount: Decimal,
    split_type: SplitType,
    splits: List[SplitInput],
    category: Optional[str] = None,
    db: Session = None
) -> Expense:
    """
    Create an expense together with its splits.
    Raises InvalidSplitError before anything is written if the split is invalid.
    """
    calculated = calculate_split(amount, split_type, splits)

    expense = Expense(
        group_id=group_id,
        paid_by_id=paid_by_id,
        description=description,
        amount=amount,
        split_type=SplitType(split_type),
        category=category.lower() if category else None
    )
    db.add(expense)
    db.flush()

    for split in calculated:
        db.add(ExpenseSplit(
            expense_id=expense.id,
            user_id=split.user_id,
            amount=split.amount,
            percentage=split.percentage
        ))

    db.commit()
    db.refresh(expense)

    logger.info(f"Created expense {expense.id} in group {group_id}: {amount} {expense.split_type.value} across {len(calculated)} users")
    return expense


def list_group_expenses(group_id: int, db: Session) -> List[Expense]:
    """Expenses of a group, newest first, with payer and splits loaded."""
    return db.query(Expense).options(
        joinedload(Expense.payer),
        joinedload(Expense.splits).joinedload(ExpenseSplit.user)
    ).filter(
        Expense.group_id == group_id
    ).order_by(Expense.created_at.desc(), Expense.id.desc()).all()
