"""Data models for Lead Scout."""

from .candidate import (
    BusinessFacts,
    Candidate,
    GeoPoint,
)
from .enrichment import (
    EnrichmentResult,
    Insight,
    InsightError,
    PerformanceMetrics,
    RawInsight,
    StructuredInsight,
    WebsiteStatus,
)
from .lead import (
    LeadScore,
    ScoredLead,
    ScoreRule,
)
from .search import (
    SearchRecord,
    SearchRequest,
    SearchResponse,
)

__all__ = [
    "BusinessFacts",
    "Candidate",
    "GeoPoint",
    "EnrichmentResult",
    "Insight",
    "InsightError",
    "PerformanceMetrics",
    "RawInsight",
    "StructuredInsight",
    "WebsiteStatus",
    "LeadScore",
    "ScoredLead",
    "ScoreRule",
    "SearchRecord",
    "SearchRequest",
    "SearchResponse",
]
