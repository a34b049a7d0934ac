"""
Group lifecycle: join codes, join requests and deletion.
"""
import logging
import secrets
import string
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from splitledger.models.group import Group, GroupMember, GroupRequest, RequestStatus

logger = logging.getLogger(__name__)

JOIN_CODE_LENGTH = 6
JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits


class MembershipError(ValueError):
    """Raised when a join request cannot be made or resolved."""


def generate_join_code(db: Session) -> str:
    """Generate a join code not used by any other group."""
    while True:
        code = "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))
        if not db.query(Group).filter(Group.join_code == code).first():
            return code


def find_group_by_code(code: str, db: Session) -> Optional[Group]:
    """Look a group up by join code; codes are matched case-insensitively."""
    return db.query(Group).filter(Group.join_code == code.strip().upper()).first()


def is_member(group_id: int, user_id: int, db: Session) -> bool:
    return db.query(GroupMember).filter(
        GroupMember.group_id == group_id,
        GroupMember.user_id == user_id
    ).first() is not None


def request_to_join(group: Group, user_id: int, db: Session) -> Tuple[GroupRequest, bool]:
    """
    Ask to join a group.

    Returns the pending request and whether it was created by this call;
    asking again while a request is pending returns the existing one.
    """
    if is_member(group.id, user_id, db):
        raise MembershipError("User is already a member of this group")

    existing = db.query(GroupRequest).filter(
        GroupRequest.group_id == group.id,
        GroupRequest.user_id == user_id,
        GroupRequest.status == RequestStatus.PENDING
    ).first()
    if existing:
        return existing, False

    join_request = GroupRequest(group_id=group.id, user_id=user_id, status=RequestStatus.PENDING)
    db.add(join_request)
    db.commit()
    db.refresh(join_request)

    logger.info(f"User {user_id} requested to join group {group.id}")
    return join_request, True


def list_pending_requests(group_id: int, db: Session) -> List[GroupRequest]:
    """Pending join requests of a group, oldest first, with the requesting user loaded."""
    return db.query(GroupRequest).options(
        joinedload(GroupRequest.user)
    ).filter(
        GroupRequest.group_id == group_id,
        GroupRequest.status == RequestStatus.PENDING
    ).order_by(GroupRequest.created_at, GroupRequest.id).all()


def resolve_request(join_request: GroupRequest, approve: bool, db: Session) -> GroupRequest:
    """Approve (adding the user as a member) or reject a pending request."""
    if join_request.status != RequestStatus.PENDING:
        raise MembershipError(f"Request is already {join_request.status.value}")

    if approve:
        if not is_member(join_request.group_id, join_request.user_id, db):
            db.add(GroupMember(group_id=join_request.group_id, user_id=join_request.user_id))
        join_request.status = RequestStatus.APPROVED
    else:
        join_request.status = RequestStatus.REJECTED

    db.commit()
    db.refresh(join_request)

    logger.info(f"Join request {join_request.id} for group {join_request.group_id} {join_request.status.value}")
    return join_request


def delete_group(group: Group, db: Session):
    """Delete a group with its members, expenses, splits, settlements and requests."""
    group_id = group.id
    db.delete(group)
    db.commit()
    logger.info(f"Deleted group {group_id}")
