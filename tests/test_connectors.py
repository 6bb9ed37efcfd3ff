"""Tests for discovery connectors."""

import asyncio
import json

import httpx
import pytest

from leadscout.connectors import GooglePlacesConnector, MockConnector
from leadscout.errors import DiscoveryFailure

PLACE = {
    "id": "ChIJ123",
    "displayName": {"text": "Riverside Plumbing", "languageCode": "en"},
    "types": ["plumber", "point_of_interest"],
    "primaryType": "plumber",
    "businessStatus": "OPERATIONAL",
    "nationalPhoneNumber": "(512) 555-0141",
    "websiteUri": "http://riverside-plumbing.com/",
    "formattedAddress": "1200 River St, Austin, TX",
    "location": {"latitude": 30.26, "longitude": -97.74},
    "rating": 4.2,
    "userRatingCount": 87,
}


class TestGooglePlacesConnector:
    """Tests for the Places text search connector."""

    def test_maps_places_and_token(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"places": [PLACE], "nextPageToken": "next-1"})

        connector = GooglePlacesConnector(api_key="k", transport=httpx.MockTransport(handler))
        page = asyncio.run(connector.discover("plumbers in austin"))

        assert page.next_page_token == "next-1"
        candidate = page.candidates[0]
        assert candidate.place_id == "ChIJ123"
        assert candidate.name == "Riverside Plumbing"
        assert candidate.website_uri == "http://riverside-plumbing.com/"
        assert candidate.location.latitude == 30.26
        assert candidate.categories() == ["plumber", "point_of_interest"]

        request = requests[0]
        assert request.headers["X-Goog-Api-Key"] == "k"
        assert "nextPageToken" in request.headers["X-Goog-FieldMask"]
        assert json.loads(request.content) == {"textQuery": "plumbers in austin", "pageSize": 20}

    def test_sends_page_token(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={})

        connector = GooglePlacesConnector(api_key="k", transport=httpx.MockTransport(handler))
        page = asyncio.run(connector.discover("q", page_token="abc"))

        assert bodies[0]["pageToken"] == "abc"
        assert page.candidates == []
        assert page.next_page_token is None

    def test_error_status_raises(self):
        def handler(request):
            return httpx.Response(403, json={"error": {"message": "API key not valid"}})

        connector = GooglePlacesConnector(api_key="k", transport=httpx.MockTransport(handler))
        with pytest.raises(DiscoveryFailure, match="403"):
            asyncio.run(connector.discover("q"))

    def test_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        connector = GooglePlacesConnector(api_key="k", transport=httpx.MockTransport(handler))
        with pytest.raises(DiscoveryFailure):
            asyncio.run(connector.discover("q"))

    def test_missing_key_raises(self):
        with pytest.raises(DiscoveryFailure):
            asyncio.run(GooglePlacesConnector(api_key="").discover("q"))


class TestMockConnector:
    def test_pages(self):
        connector = MockConnector(page_size=2)

        first = asyncio.run(connector.discover("anything"))
        assert len(first.candidates) == 2
        assert first.next_page_token == "2"

        last = asyncio.run(connector.discover("anything", "4"))
        assert len(last.candidates) == 1
        assert last.next_page_token is None
