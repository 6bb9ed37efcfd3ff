"""Search record and request/response models."""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field


class SearchRecord(BaseModel):
    """Per-query accumulator of lead references and continuation state."""

    key: str = Field(description="Canonicalized search string")
    lead_ids: list[str] = Field(
        default_factory=list,
        description="Lead ids sorted descending by general percent",
    )
    invocation_count: int = 0
    result_count: int = 0
    continuation_token: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_complete(self) -> bool:
        """No more candidates remain to be discovered for this key."""
        return self.continuation_token is None


class SearchRequest(BaseModel):
    """Request body for a search."""

    query: str = Field(min_length=1)
    desired_count: Optional[int] = Field(default=None, gt=0)


class SearchResponse(BaseModel):
    """Response for a search."""

    query: str
    leads: list[dict[str, Any]]
    cached: bool
