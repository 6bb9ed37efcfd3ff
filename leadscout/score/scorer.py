"""Rule-based lead scoring."""

import logging
import math
import re
from datetime import date
from typing import Optional

from leadscout.config import settings
from leadscout.models import (
    Candidate,
    EnrichmentResult,
    LeadScore,
    ScoredLead,
    ScoreRule,
    WebsiteStatus,
)

logger = logging.getLogger(__name__)


class LeadScorer:
    """Score a lead on general readiness and marketing opportunity.

    Every rule that fires is recorded with its label, triggering value and
    points, so the percentages can be rebuilt from the rationale alone.
    Scoring depends only on its inputs and the configured current year.
    """

    GENERAL_MAX = 85
    MARKETING_MAX = 190

    # Marketing rules: (label, keywords, points); matched per post
    MARKETING_RULES = [
        ("Job post: web developer", ("web developer",), 50),
        ("Job post: new store opening", ("new store opening",), 30),
        ("Job post: designer", ("designer",), 40),
        ("Job post: new product/launching", ("new product", "launching"), 40),
        (
            "Job post: marketing role/manager",
            ("marketing role", "marketing manager", "marketing managers", "hiring for marketing"),
            35,
        ),
    ]

    def __init__(
        self,
        low_rating_threshold: Optional[float] = None,
        low_performance_threshold: Optional[float] = None,
        webmail_domains: Optional[list[str]] = None,
        clamp: Optional[bool] = None,
        current_year: Optional[int] = None,
    ):
        self.low_rating_threshold = (
            settings.low_rating_threshold if low_rating_threshold is None else low_rating_threshold
        )
        self.low_performance_threshold = (
            settings.low_performance_threshold
            if low_performance_threshold is None
            else low_performance_threshold
        )
        domains = settings.webmail_domains if webmail_domains is None else webmail_domains
        self._webmail = re.compile("|".join(re.escape(d) for d in domains), re.I) if domains else None
        self.clamp = settings.clamp_scores if clamp is None else clamp
        self.current_year = current_year

    def score(self, candidate: Candidate, enrichment: EnrichmentResult) -> LeadScore:
        """Compute both percentages and their rationale."""
        general = self._general_rules(candidate, enrichment)
        marketing = self._marketing_rules(enrichment)

        return LeadScore(
            general_percent=self._percent(general, self.GENERAL_MAX),
            marketing_percent=self._percent(marketing, self.MARKETING_MAX),
            general_rationale=general,
            marketing_rationale=marketing,
        )

    def score_lead(
        self,
        search_key: str,
        candidate: Candidate,
        enrichment: EnrichmentResult,
    ) -> ScoredLead:
        """Bundle candidate, enrichment and score into a lead."""
        return ScoredLead(
            search_key=search_key,
            candidate=candidate,
            enrichment=enrichment,
            score=self.score(candidate, enrichment),
        )

    def _general_rules(
        self,
        candidate: Candidate,
        enrichment: EnrichmentResult,
    ) -> list[ScoreRule]:
        rules = []

        if not candidate.website_uri:
            rules.append(ScoreRule(parameter="Website missing", value=False, points=30))

        if candidate.rating is not None and candidate.rating < self.low_rating_threshold:
            rules.append(ScoreRule(
                parameter=f"Google rating < {self.low_rating_threshold:g}",
                value=candidate.rating,
                points=10,
            ))

        email_domains = [e.split("@", 1)[1] for e in enrichment.emails if "@" in e]
        if self._webmail and any(self._webmail.search(d) for d in email_domains):
            rules.append(ScoreRule(
                parameter="Email on free webmail domain",
                value=email_domains,
                points=15,
            ))

        performance = enrichment.performance
        if (
            performance is not None
            and isinstance(performance.performance, (int, float))
            and performance.performance < self.low_performance_threshold
        ):
            rules.append(ScoreRule(
                parameter=f"PageSpeed performance < {self.low_performance_threshold:g}",
                value=performance.performance,
                points=25,
            ))

        founding_year = enrichment.insight.founding_year() if enrichment.insight else None
        if founding_year and self._year() - founding_year < 2:
            rules.append(ScoreRule(
                parameter="Business registered < 2 years",
                value=founding_year,
                points=20,
            ))

        if enrichment.has_ssl is False:
            rules.append(ScoreRule(parameter="No SSL on site", value=False, points=10))

        if enrichment.website_status == WebsiteStatus.UNAVAILABLE:
            rules.append(ScoreRule(
                parameter="Website unavailable",
                value=enrichment.website_status.value,
                points=25,
            ))

        return rules

    def _marketing_rules(self, enrichment: EnrichmentResult) -> list[ScoreRule]:
        rules = []
        if not enrichment.insight:
            return rules

        for content in enrichment.insight.post_contents():
            lowered = content.lower()
            for label, keywords, points in self.MARKETING_RULES:
                if any(k in lowered for k in keywords):
                    rules.append(ScoreRule(parameter=label, value=content, points=points))

        return rules

    def _percent(self, rules: list[ScoreRule], maximum: int) -> int:
        total = sum(r.points for r in rules)
        # Round half up
        percent = int(math.floor(100 * total / maximum + 0.5))
        return min(percent, 100) if self.clamp else percent

    def _year(self) -> int:
        return self.current_year or date.today().year
