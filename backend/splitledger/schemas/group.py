"""
Pydantic schemas for Group entity.
"""
from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import datetime


class GroupBase(BaseModel):
    """Base group schema."""
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None


class GroupCreate(GroupBase):
    """Schema for group creation."""
    member_ids: List[int] = []  # Users added as members on creation


class GroupResponse(GroupBase):
    """Schema for group response."""
    id: int
    join_code: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class GroupMemberResponse(BaseModel):
    """Schema for group member response."""
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True


class GroupDetailResponse(GroupResponse):
    """Schema for detailed group response with members."""
    members: List[GroupMemberResponse] = []


class MemberAdd(BaseModel):
    """Schema for adding a member to a group."""
    user_id: int


class JoinGroupRequest(BaseModel):
    """Schema for asking to join a group by its code."""
    code: str = Field(min_length=1)
    user_id: int


class GroupRef(BaseModel):
    id: int
    name: str


class JoinGroupResponse(BaseModel):
    """Schema for the outcome of a join request."""
    message: str
    request_id: int
    group: GroupRef


class GroupRequestResponse(BaseModel):
    """Schema for a pending join request."""
    id: int
    user_id: int
    name: str
    email: str
    created_at: datetime


class RequestAction(BaseModel):
    """Schema for approving or rejecting a join request."""
    action: Literal["APPROVE", "REJECT"]


class MessageResponse(BaseModel):
    message: str
