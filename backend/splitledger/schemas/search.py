"""
Pydantic schemas for search results.
"""
from pydantic import BaseModel
from typing import List, Literal, Optional


class SearchResult(BaseModel):
    """A single match; `type` says which entity `id` refers to."""
    type: Literal["group", "user", "expense"]
    id: int
    title: str
    subtitle: Optional[str] = None


class SearchResponse(BaseModel):
    results: List[SearchResult] = []
