"""Mock connector for testing."""

from typing import Optional

from leadscout.models import Candidate, GeoPoint
from .base import DiscoveryPage, DiscoverySource


class MockConnector(DiscoverySource):
    """Mock connector that pages through predefined businesses."""

    name = "mock"

    def __init__(self, candidates: Optional[list[Candidate]] = None, page_size: int = 20):
        self._candidates = self._default_candidates() if candidates is None else candidates
        self.page_size = page_size
        self.calls: list[tuple[str, Optional[str]]] = []

    async def discover(self, query: str, page_token: Optional[str] = None) -> DiscoveryPage:
        """Return the page starting at the offset encoded in page_token."""
        self.calls.append((query, page_token))
        offset = int(page_token or 0)
        end = offset + self.page_size
        return DiscoveryPage(
            candidates=self._candidates[offset:end],
            next_page_token=str(end) if end < len(self._candidates) else None,
        )

    def _default_candidates(self) -> list[Candidate]:
        """Generate default test businesses."""
        return [
            Candidate(
                place_id="mock-riverside-plumbing",
                name="Riverside Plumbing Co",
                types=["plumber", "point_of_interest"],
                primary_type="plumber",
                business_status="OPERATIONAL",
                national_phone_number="(512) 555-0141",
                website_uri="http://riverside-plumbing.example",
                formatted_address="1200 River St, Austin, TX 78701",
                location=GeoPoint(latitude=30.2606, longitude=-97.7420),
                rating=4.1,
                user_rating_count=87,
            ),
            Candidate(
                place_id="mock-bluebonnet-bakery",
                name="Bluebonnet Bakery",
                types=["bakery", "cafe", "food"],
                primary_type="bakery",
                business_status="OPERATIONAL",
                national_phone_number="(512) 555-0178",
                website_uri="https://bluebonnet-bakery.example",
                formatted_address="3404 Guadalupe St, Austin, TX 78705",
                location=GeoPoint(latitude=30.3001, longitude=-97.7394),
                rating=4.7,
                user_rating_count=412,
            ),
            Candidate(
                place_id="mock-lonestar-hvac",
                name="Lone Star HVAC",
                types=["hvac_contractor", "point_of_interest"],
                primary_type="hvac_contractor",
                business_status="OPERATIONAL",
                national_phone_number="(512) 555-0110",
                formatted_address="88 Burnet Rd, Austin, TX 78757",
                location=GeoPoint(latitude=30.3472, longitude=-97.7376),
                rating=3.9,
                user_rating_count=23,
            ),
            Candidate(
                place_id="mock-eastside-dental",
                name="Eastside Family Dental",
                types=["dentist", "health"],
                primary_type="dentist",
                business_status="OPERATIONAL",
                national_phone_number="(512) 555-0192",
                website_uri="https://eastside-dental.example",
                formatted_address="2110 E 7th St, Austin, TX 78702",
                location=GeoPoint(latitude=30.2618, longitude=-97.7205),
                rating=4.8,
                user_rating_count=156,
            ),
            Candidate(
                place_id="mock-capitol-auto",
                name="Capitol Auto Repair",
                types=["car_repair", "point_of_interest"],
                primary_type="car_repair",
                business_status="OPERATIONAL",
                national_phone_number="(512) 555-0133",
                website_uri="http://capitol-auto.example",
                formatted_address="5005 S Congress Ave, Austin, TX 78745",
                location=GeoPoint(latitude=30.2130, longitude=-97.7686),
                rating=4.4,
                user_rating_count=64,
            ),
        ]
