"""
Pydantic schemas for Settlement entity and computed balances.
"""
from pydantic import BaseModel, Field, model_validator
from typing import List, Literal, Optional
from datetime import datetime
from decimal import Decimal
from splitledger.schemas.expense import UserRef


class SettlementCreate(BaseModel):
    """Schema for recording a payment between two members."""
    group_id: int
    from_user_id: int
    to_user_id: int
    amount: Decimal = Field(gt=0)

    @model_validator(mode="after")
    def check_distinct_users(self):
        """A member cannot settle with themselves."""
        if self.from_user_id == self.to_user_id:
            raise ValueError("Cannot settle with yourself")
        return self


class SettlementResponse(BaseModel):
    """Schema for settlement response."""
    id: int
    group_id: int
    amount: Decimal
    from_user: UserRef
    to_user: UserRef
    created_at: datetime


class Balance(BaseModel):
    """Schema for a single simplified transfer."""
    from_user_id: int
    from_username: str
    to_user_id: int
    to_username: str
    amount: Decimal


class GroupBalancesResponse(BaseModel):
    """Schema for the simplified balances of a group."""
    group_id: int
    group_name: str
    balances: List[Balance]


class UserBalanceResponse(BaseModel):
    """Schema for a user's totals across all their groups."""
    user_id: int
    user_name: str
    total_owes: Decimal
    total_owed: Decimal
    net_balance: Decimal


class TransactionItem(BaseModel):
    """Schema for one entry of a group's activity feed."""
    id: int
    type: Literal["expense", "settlement"]
    description: str
    amount: Decimal
    paid_by: Optional[UserRef] = None
    from_user: Optional[UserRef] = None
    to_user: Optional[UserRef] = None
    category: Optional[str] = None
    created_at: datetime
