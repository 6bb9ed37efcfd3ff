"""Enrichment result models."""

import re
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

_LEADING_INT = re.compile(r"^\s*(\d+)")


class WebsiteStatus(str, Enum):
    """Reachability of a candidate's website."""

    UNKNOWN = "Unknown"
    ONLINE = "Online"
    UNAVAILABLE = "Unavailable"


class PerformanceMetrics(BaseModel):
    """Normalized page-performance measurement."""

    performance: Optional[float] = Field(default=None, description="Performance score 0-100")
    largest_contentful_paint: Optional[str] = None
    first_contentful_paint: Optional[str] = None
    time_to_interactive: Optional[str] = None
    observed_load_time: Optional[float] = Field(default=None, description="Observed load in ms")

    # Set when the performance service call failed
    error: Optional[str] = None
    details: Optional[str] = None


class StructuredInsight(BaseModel):
    """Insight parsed from the analysis service as a JSON object."""

    kind: Literal["structured"] = "structured"
    data: dict[str, Any] = Field(default_factory=dict)

    def founding_year(self) -> Optional[int]:
        company = self.data.get("company")
        if not isinstance(company, dict):
            return None
        value = company.get("foundingYear", company.get("founding_year"))
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return int(value)
        if isinstance(value, str):
            match = _LEADING_INT.match(value)
            if match:
                return int(match.group(1))
        return None

    def post_contents(self) -> list[str]:
        posts = self.data.get("publicPosts/JobPosts")
        if posts is None:
            posts = self.data.get("public_posts")
        if not isinstance(posts, list):
            return []

        contents = []
        for post in posts:
            if isinstance(post, dict):
                contents.append(str(post.get("content") or ""))
            elif isinstance(post, str):
                contents.append(post)
        return contents


class RawInsight(BaseModel):
    """Insight text the analysis service returned in a non-JSON shape."""

    kind: Literal["raw"] = "raw"
    text: str = ""

    def founding_year(self) -> Optional[int]:
        return None

    def post_contents(self) -> list[str]:
        return []


class InsightError(BaseModel):
    """The analysis service could not be called."""

    kind: Literal["error"] = "error"
    error: str
    status: Union[int, str] = "Unknown"
    details: Optional[str] = None

    def founding_year(self) -> Optional[int]:
        return None

    def post_contents(self) -> list[str]:
        return []


Insight = Annotated[
    Union[StructuredInsight, RawInsight, InsightError],
    Field(discriminator="kind"),
]


class EnrichmentResult(BaseModel):
    """Everything gathered about one candidate's web presence."""

    model_config = ConfigDict(frozen=True)

    website_status: WebsiteStatus = WebsiteStatus.UNKNOWN
    final_url: Optional[str] = Field(default=None, description="Canonical URL after redirects")
    has_ssl: Optional[bool] = Field(default=None, description="None when the site was never checked")
    emails: list[str] = Field(default_factory=list)
    linkedin: Optional[str] = None
    performance: Optional[PerformanceMetrics] = None
    insight: Optional[Insight] = None
    error: Optional[str] = Field(default=None, description="Why enrichment could not complete")
