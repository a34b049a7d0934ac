"""
User management routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from splitledger.db.session import get_db
from splitledger.schemas.user import UserCreate, UserResponse, UserStatsResponse
from splitledger.schemas.settlement import UserBalanceResponse
from splitledger.models.user import User
from splitledger.services.balance_service import get_user_balance
from splitledger.services.stats_service import get_user_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def get_user_or_404(user_id: int, db: Session) -> User:
    """Fetch a user or raise 404."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create a new user."""
    existing = db.query(User).filter(User.email == user_data.email).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    user = User(name=user_data.name, email=user_data.email)
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Created user {user.id}")
    return user


@router.get("", response_model=List[UserResponse])
async def list_users(db: Session = Depends(get_db)):
    """List all users."""
    return db.query(User).order_by(User.id).all()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: Session = Depends(get_db)):
    """Get user by ID."""
    return get_user_or_404(user_id, db)


@router.get("/{user_id}/balances", response_model=UserBalanceResponse)
async def get_user_balances(user_id: int, db: Session = Depends(get_db)):
    """Get what a user owes and is owed across all their groups."""
    user = get_user_or_404(user_id, db)
    summary = get_user_balance(user.id, db)

    return UserBalanceResponse(
        user_id=user.id,
        user_name=user.name,
        **summary
    )


@router.get("/{user_id}/stats", response_model=UserStatsResponse)
async def get_user_spending_stats(user_id: int, db: Session = Depends(get_db)):
    """Get a user's spending over the last six months by month, group and category."""
    user = get_user_or_404(user_id, db)
    return get_user_stats(user.id, db)
