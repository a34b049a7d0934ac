"""
Group management routes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from splitledger.db.session import get_db
from splitledger.models.user import User
from splitledger.models.group import Group, GroupMember
from splitledger.schemas.group import (
    GroupCreate, GroupResponse, GroupDetailResponse,
    GroupMemberResponse, MemberAdd, JoinGroupRequest, JoinGroupResponse,
    GroupRef, GroupRequestResponse, MessageResponse
)
from splitledger.schemas.settlement import GroupBalancesResponse, TransactionItem
from splitledger.services.group_service import (
    MembershipError, delete_group, find_group_by_code, generate_join_code,
    list_pending_requests, request_to_join
)
from splitledger.services.settlement_service import calculate_group_balances
from splitledger.services.transaction_service import get_group_transactions
from splitledger.api.routes.users import get_user_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_or_404(group_id: int, db: Session) -> Group:
    """Fetch a group or raise 404."""
    group = db.query(Group).filter(Group.id == group_id).first()
    if not group:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Group not found"
        )
    return group


def check_group_member(group_id: int, user_id: int, db: Session):
    """Raise 400 unless the user belongs to the group."""
    member = db.query(GroupMember).filter(
        GroupMember.group_id == group_id,
        GroupMember.user_id == user_id
    ).first()

    if not member:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"User {user_id} is not a member of this group"
        )


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(group_data: GroupCreate, db: Session = Depends(get_db)):
    """Create a new group, optionally with initial members."""
    for user_id in set(group_data.member_ids):
        get_user_or_404(user_id, db)

    group = Group(
        name=group_data.name,
        description=group_data.description,
        join_code=generate_join_code(db)
    )
    db.add(group)
    db.flush()

    # dict.fromkeys keeps the given order while dropping duplicates
    for user_id in dict.fromkeys(group_data.member_ids):
        db.add(GroupMember(group_id=group.id, user_id=user_id))

    db.commit()
    db.refresh(group)

    logger.info(f"Created group {group.id} with {len(group.members)} members")
    return group


@router.get("", response_model=List[GroupResponse])
async def list_groups(db: Session = Depends(get_db)):
    """List all groups."""
    return db.query(Group).order_by(Group.id).all()


@router.get("/{group_id}", response_model=GroupDetailResponse)
async def get_group(group_id: int, db: Session = Depends(get_db)):
    """Get group details with members."""
    group = get_group_or_404(group_id, db)

    members = db.query(User).join(GroupMember).filter(
        GroupMember.group_id == group_id
    ).order_by(GroupMember.id).all()

    return GroupDetailResponse(
        id=group.id,
        name=group.name,
        description=group.description,
        join_code=group.join_code,
        created_at=group.created_at,
        members=[GroupMemberResponse.model_validate(m) for m in members]
    )


@router.post("/{group_id}/members", response_model=GroupMemberResponse, status_code=status.HTTP_201_CREATED)
async def add_member(group_id: int, member_data: MemberAdd, db: Session = Depends(get_db)):
    """Add a user to a group."""
    get_group_or_404(group_id, db)
    user = get_user_or_404(member_data.user_id, db)

    existing = db.query(GroupMember).filter(
        GroupMember.group_id == group_id,
        GroupMember.user_id == user.id
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User is already a member of this group"
        )

    db.add(GroupMember(group_id=group_id, user_id=user.id))
    db.commit()

    return user


@router.get("/{group_id}/balances", response_model=GroupBalancesResponse)
async def get_group_balances(group_id: int, db: Session = Depends(get_db)):
    """Get the simplified list of who owes whom in a group."""
    group = get_group_or_404(group_id, db)
    balances = calculate_group_balances(group.id, db)

    return GroupBalancesResponse(
        group_id=group.id,
        group_name=group.name,
        balances=balances
    )


@router.get("/{group_id}/transactions", response_model=List[TransactionItem])
async def get_transactions(group_id: int, db: Session = Depends(get_db)):
    """Get all expenses and settlements of a group, newest first."""
    get_group_or_404(group_id, db)
    return get_group_transactions(group_id, db)


@router.delete("/{group_id}", response_model=MessageResponse)
async def remove_group(group_id: int, db: Session = Depends(get_db)):
    """Delete a group together with everything recorded in it."""
    group = get_group_or_404(group_id, db)
    delete_group(group, db)
    return MessageResponse(message="Group deleted successfully")


@router.post("/join", response_model=JoinGroupResponse)
async def join_group(join_data: JoinGroupRequest, db: Session = Depends(get_db)):
    """Ask to join a group by its join code."""
    user = get_user_or_404(join_data.user_id, db)

    group = find_group_by_code(join_data.code, db)
    if not group:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid join code"
        )

    try:
        join_request, created = request_to_join(group, user.id, db)
    except MembershipError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return JoinGroupResponse(
        message="Request sent" if created else "Request already sent",
        request_id=join_request.id,
        group=GroupRef(id=group.id, name=group.name)
    )


@router.get("/{group_id}/requests", response_model=List[GroupRequestResponse])
async def get_join_requests(group_id: int, db: Session = Depends(get_db)):
    """Get the pending join requests of a group."""
    get_group_or_404(group_id, db)

    return [
        GroupRequestResponse(
            id=r.id,
            user_id=r.user_id,
            name=r.user.name,
            email=r.user.email,
            created_at=r.created_at
        )
        for r in list_pending_requests(group_id, db)
    ]
