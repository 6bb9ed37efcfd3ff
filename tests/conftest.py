"""Shared fixtures."""

import pytest

from leadscout.models import Candidate, EnrichmentResult, LeadScore, ScoredLead, WebsiteStatus
from leadscout.models.database import init_db


@pytest.fixture
def session_factory(tmp_path):
    return init_db(f"sqlite:///{tmp_path / 'leadscout-test.db'}")


def make_candidate(place_id: str = "place-1", **kwargs) -> Candidate:
    """Create a test candidate with defaults."""
    defaults = {
        "place_id": place_id,
        "name": f"Business {place_id}",
        "types": ["plumber"],
        "primary_type": "plumber",
        "website_uri": f"https://{place_id}.example/",
        "rating": 4.6,
    }
    defaults.update(kwargs)
    return Candidate(**defaults)


def make_lead(general: int, key: str = "plumbers in austin", place_id: str = None) -> ScoredLead:
    """Create a scored lead with a given general percent."""
    return ScoredLead(
        search_key=key,
        candidate=make_candidate(place_id or f"p{general}"),
        score=LeadScore(general_percent=general),
    )


class FakeInspector:
    """Marks every site reachable without SSL, except those listed as failing."""

    def __init__(self, failing: tuple = ()):
        self.failing = failing
        self.calls = []

    async def inspect(self, url, facts, prompt_override=None):
        self.calls.append(facts.name)
        if facts.name in self.failing:
            raise RuntimeError(f"inspection crashed for {facts.name}")
        return EnrichmentResult(
            website_status=WebsiteStatus.ONLINE if url else WebsiteStatus.UNKNOWN,
            final_url=url,
            has_ssl=False,
        )
