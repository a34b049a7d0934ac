"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import List
from datetime import datetime
from decimal import Decimal


class UserBase(BaseModel):
    """Base user schema."""
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for user creation."""
    pass


class UserResponse(UserBase):
    """Schema for user response."""
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


class StatItem(BaseModel):
    """One labelled spending total."""
    name: str
    value: Decimal


class UserStatsResponse(BaseModel):
    """Schema for a user's spending statistics."""
    monthly: List[StatItem]
    by_group: List[StatItem]
    by_category: List[StatItem]
