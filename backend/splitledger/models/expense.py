"""
Expense model for tracking shared spending.
"""
from sqlalchemy import Column, String, Numeric, ForeignKey, Integer, Text, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.orm import relationship
from splitledger.db.base import BaseModel
import enum


class SplitType(str, enum.Enum):
    """How an expense is allocated among its participants."""
    EQUAL = "EQUAL"
    EXACT = "EXACT"
    PERCENTAGE = "PERCENTAGE"


class Expense(BaseModel):
    """Expense model representing a single payment made for the group."""
    __tablename__ = "expenses"

    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    paid_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    split_type = Column(SQLEnum(SplitType), nullable=False, default=SplitType.EQUAL)
    category = Column(String(50), nullable=True)

    # Relationships
    group = relationship("Group", back_populates="expenses")
    payer = relationship("User", foreign_keys=[paid_by_id], back_populates="expenses_paid")
    splits = relationship("ExpenseSplit", back_populates="expense", cascade="all, delete-orphan", order_by="ExpenseSplit.id")


class ExpenseSplit(BaseModel):
    """Portion of an expense attributed to one user."""
    __tablename__ = "expense_splits"
    __table_args__ = (UniqueConstraint("expense_id", "user_id", name="uq_expense_split_user"),)

    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    percentage = Column(Numeric(5, 2), nullable=True)  # Only set for PERCENTAGE splits

    # Relationships
    expense = relationship("Expense", back_populates="splits")
    user = relationship("User", back_populates="expense_splits")
