"""
Search route.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from splitledger.db.session import get_db
from splitledger.schemas.search import SearchResponse
from splitledger.services.search_service import search

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=SearchResponse)
async def search_all(q: str = Query(default=""), db: Session = Depends(get_db)):
    """Search groups, users and expenses."""
    return SearchResponse(results=search(q, db))
