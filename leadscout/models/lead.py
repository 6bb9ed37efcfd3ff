"""Scored lead models."""

import uuid
from datetime import datetime
from typing import Any
from pydantic import BaseModel, Field

from .candidate import Candidate
from .enrichment import EnrichmentResult


class ScoreRule(BaseModel):
    """One scoring rule that fired, with what triggered it."""

    parameter: str = Field(description="Rule label")
    value: Any = Field(default=None, description="Value that triggered the rule")
    points: int


class LeadScore(BaseModel):
    """Two percentage scores plus the rules that produced them."""

    general_percent: int = 0
    marketing_percent: int = 0
    general_rationale: list[ScoreRule] = Field(default_factory=list)
    marketing_rationale: list[ScoreRule] = Field(default_factory=list)


class ScoredLead(BaseModel):
    """Candidate + enrichment + score; the unit persisted and returned."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    search_key: str
    candidate: Candidate
    enrichment: EnrichmentResult = Field(default_factory=EnrichmentResult)
    score: LeadScore = Field(default_factory=LeadScore)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def as_response(self) -> dict[str, Any]:
        """Flatten into the public lead shape."""
        payload = {"id": self.id, "search_key": self.search_key}
        payload.update(self.candidate.model_dump(mode="json"))
        payload.update(self.enrichment.model_dump(mode="json"))
        payload["score"] = self.score.model_dump(mode="json")
        payload["created_at"] = self.created_at.isoformat()
        return payload
