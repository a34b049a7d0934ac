"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from splitledger.models.expense import SplitType


class SplitInput(BaseModel):
    """Per-participant input for a split; which field is used depends on the split type."""
    user_id: int
    amount: Optional[Decimal] = Field(default=None, ge=0)  # EXACT
    percentage: Optional[Decimal] = Field(default=None, ge=0)  # PERCENTAGE


class ExpenseCreate(BaseModel):
    """Schema for expense creation."""
    description: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, decimal_places=2)
    paid_by_id: int
    split_type: SplitType
    splits: List[SplitInput]
    category: Optional[str] = None


class UserRef(BaseModel):
    """Minimal user reference embedded in other responses."""
    id: int
    name: str


class ExpenseSplitResponse(BaseModel):
    """Schema for a single expense split."""
    user: UserRef
    amount: Decimal
    percentage: Optional[Decimal] = None


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    id: int
    group_id: int
    description: str
    amount: Decimal
    split_type: SplitType
    category: Optional[str] = None
    paid_by: UserRef
    splits: List[ExpenseSplitResponse] = []
    created_at: datetime
