"""
Settlement management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from splitledger.db.session import get_db
from splitledger.models.settlement import Settlement
from splitledger.schemas.expense import UserRef
from splitledger.schemas.settlement import SettlementCreate, SettlementResponse
from splitledger.services.settlement_service import record_settlement
from splitledger.api.routes.groups import get_group_or_404, check_group_member

router = APIRouter(prefix="/settlements", tags=["settlements"])


def build_settlement_response(settlement: Settlement) -> SettlementResponse:
    """Build the response body for a settlement."""
    return SettlementResponse(
        id=settlement.id,
        group_id=settlement.group_id,
        amount=settlement.amount,
        from_user=UserRef(id=settlement.from_user.id, name=settlement.from_user.name),
        to_user=UserRef(id=settlement.to_user.id, name=settlement.to_user.name),
        created_at=settlement.created_at
    )


@router.get("", response_model=List[SettlementResponse])
async def list_settlements(group_id: Optional[int] = None, db: Session = Depends(get_db)):
    """List settlements, newest first, optionally for one group."""
    query = db.query(Settlement)
    if group_id is not None:
        query = query.filter(Settlement.group_id == group_id)
    settlements = query.order_by(Settlement.created_at.desc(), Settlement.id.desc()).all()
    return [build_settlement_response(s) for s in settlements]


@router.post("", response_model=SettlementResponse, status_code=status.HTTP_201_CREATED)
async def create_settlement(settlement_data: SettlementCreate, db: Session = Depends(get_db)):
    """Record that one member paid another."""
    get_group_or_404(settlement_data.group_id, db)
    check_group_member(settlement_data.group_id, settlement_data.from_user_id, db)
    check_group_member(settlement_data.group_id, settlement_data.to_user_id, db)

    settlement = record_settlement(
        group_id=settlement_data.group_id,
        from_user_id=settlement_data.from_user_id,
        to_user_id=settlement_data.to_user_id,
        amount=settlement_data.amount,
        db=db
    )

    return build_settlement_response(settlement)
