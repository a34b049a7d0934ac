"""
Join request routes.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from splitledger.db.session import get_db
from splitledger.models.group import GroupRequest
from splitledger.schemas.group import MessageResponse, RequestAction
from splitledger.services.group_service import MembershipError, resolve_request

router = APIRouter(prefix="/requests", tags=["requests"])


@router.post("/{request_id}/action", response_model=MessageResponse)
async def act_on_request(request_id: int, action_data: RequestAction, db: Session = Depends(get_db)):
    """Approve or reject a join request."""
    join_request = db.query(GroupRequest).filter(GroupRequest.id == request_id).first()
    if not join_request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Request not found"
        )

    try:
        join_request = resolve_request(join_request, action_data.action == "APPROVE", db)
    except MembershipError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return MessageResponse(message=f"Request {join_request.status.value}")
