"""Google Places (v1) text search connector."""

import logging
from typing import Optional

import httpx

from leadscout.config import settings
from leadscout.errors import DiscoveryFailure
from leadscout.models import Candidate
from .base import DiscoveryPage, DiscoverySource

logger = logging.getLogger(__name__)


class GooglePlacesConnector(DiscoverySource):
    """Search local businesses with the Places API searchText endpoint."""

    name = "google_places"
    SEARCH_URL = "https://places.googleapis.com/v1/places:searchText"
    PAGE_SIZE = 20

    FIELD_MASK = ",".join([
        "places.id",
        "places.displayName",
        "places.types",
        "places.primaryType",
        "places.businessStatus",
        "places.nationalPhoneNumber",
        "places.internationalPhoneNumber",
        "places.websiteUri",
        "places.googleMapsUri",
        "places.formattedAddress",
        "places.location",
        "places.rating",
        "places.userRatingCount",
        "places.reviews",
        "nextPageToken",
    ])

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.google_places_api_key
        self.timeout = timeout or settings.discovery_timeout
        self._transport = transport

    async def discover(self, query: str, page_token: Optional[str] = None) -> DiscoveryPage:
        if not self.api_key:
            raise DiscoveryFailure("Google Places API key not configured (GOOGLE_PLACES_API_KEY)")

        body = {"textQuery": query, "pageSize": self.PAGE_SIZE}
        if page_token:
            body["pageToken"] = page_token

        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": self.FIELD_MASK,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.SEARCH_URL, json=body, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Places search for {query!r} returned {e.response.status_code}")
            raise DiscoveryFailure(
                f"Places search failed with status {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Places search for {query!r} failed: {e}")
            raise DiscoveryFailure(f"Places search failed: {e}") from e

        candidates = [Candidate.from_place(place) for place in data.get("places") or []]
        next_token = data.get("nextPageToken") or None
        logger.debug(f"Places returned {len(candidates)} results for {query!r} (more: {bool(next_token)})")

        return DiscoveryPage(candidates=candidates, next_page_token=next_token)
