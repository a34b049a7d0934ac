"""
User model for group members.
"""
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from splitledger.db.base import BaseModel


class User(BaseModel):
    """User model; the display name is what balances are labelled with."""
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)

    # Relationships
    memberships = relationship("GroupMember", back_populates="user", cascade="all, delete-orphan")
    expenses_paid = relationship("Expense", foreign_keys="Expense.paid_by_id", back_populates="payer")
    expense_splits = relationship("ExpenseSplit", back_populates="user")
    group_requests = relationship("GroupRequest", back_populates="user", cascade="all, delete-orphan")
