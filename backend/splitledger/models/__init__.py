"""Models package - Import all models for SQLAlchemy registration."""
from splitledger.models.user import User
from splitledger.models.group import Group, GroupMember, GroupRequest, RequestStatus
from splitledger.models.expense import Expense, ExpenseSplit, SplitType
from splitledger.models.settlement import Settlement

__all__ = [
    "User",
    "Group",
    "GroupMember",
    "GroupRequest",
    "RequestStatus",
    "Expense",
    "ExpenseSplit",
    "SplitType",
    "Settlement",
]
