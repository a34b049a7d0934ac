"""
Group model defining the scope balances are computed over.
"""
from sqlalchemy import Column, String, Text, ForeignKey, Integer, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
from splitledger.db.base import BaseModel
import enum


class RequestStatus(str, enum.Enum):
    """Lifecycle of a request to join a group."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Group(BaseModel):
    """Group of users sharing expenses."""
    __tablename__ = "groups"

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    join_code = Column(String(6), unique=True, nullable=True, index=True)

    # Relationships
    members = relationship("GroupMember", back_populates="group", cascade="all, delete-orphan")
    expenses = relationship("Expense", back_populates="group", cascade="all, delete-orphan")
    settlements = relationship("Settlement", back_populates="group", cascade="all, delete-orphan")
    requests = relationship("GroupRequest", back_populates="group", cascade="all, delete-orphan")


class GroupMember(BaseModel):
    """Junction table for Group and User many-to-many relationship."""
    __tablename__ = "group_members"
    __table_args__ = (UniqueConstraint("group_id", "user_id", name="uq_group_member"),)

    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    group = relationship("Group", back_populates="members")
    user = relationship("User", back_populates="memberships")


class GroupRequest(BaseModel):
    """A user's request to join a group by its join code."""
    __tablename__ = "group_requests"

    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(SQLEnum(RequestStatus), nullable=False, default=RequestStatus.PENDING)

    # Relationships
    group = relationship("Group", back_populates="requests")
    user = relationship("User", back_populates="group_requests")
