"""
Expense management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from splitledger.db.session import get_db
from splitledger.models.expense import Expense
from splitledger.schemas.expense import ExpenseCreate, ExpenseResponse, ExpenseSplitResponse, UserRef
from splitledger.services.expense_service import create_expense_with_splits, list_group_expenses
from splitledger.api.routes.groups import get_group_or_404, check_group_member

router = APIRouter(prefix="/groups", tags=["expenses"])


def build_expense_response(expense: Expense) -> ExpenseResponse:
    """Build the response body for an expense with its splits."""
    return ExpenseResponse(
        id=expense.id,
        group_id=expense.group_id,
        description=expense.description,
        amount=expense.amount,
        split_type=expense.split_type,
        category=expense.category,
        paid_by=UserRef(id=expense.payer.id, name=expense.payer.name),
        splits=[
            ExpenseSplitResponse(
                user=UserRef(id=s.user.id, name=s.user.name),
                amount=s.amount,
                percentage=s.percentage
            )
            for s in expense.splits
        ],
        created_at=expense.created_at
    )


@router.get("/{group_id}/expenses", response_model=List[ExpenseResponse])
async def get_expenses(group_id: int, db: Session = Depends(get_db)):
    """Get all expenses in a group, newest first."""
    get_group_or_404(group_id, db)
    expenses = list_group_expenses(group_id, db)
    return [build_expense_response(e) for e in expenses]


@router.post("/{group_id}/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(group_id: int, expense_data: ExpenseCreate, db: Session = Depends(get_db)):
    """
    Add an expense to a group.
    The payer and every split participant must be members of the group.
    Invalid splits are reported as 400 by the InvalidSplitError handler.
    """
    get_group_or_404(group_id, db)
    check_group_member(group_id, expense_data.paid_by_id, db)
    for split in expense_data.splits:
        check_group_member(group_id, split.user_id, db)

    expense = create_expense_with_splits(
        group_id=group_id,
        paid_by_id=expense_data.paid_by_id,
        description=expense_data.description,
        amount=expense_data.amount,
        split_type=expense_data.split_type,
        splits=expense_data.splits,
        category=expense_data.category,
        db=db
    )

    return build_expense_response(expense)
