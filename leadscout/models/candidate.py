"""Candidate business models."""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class GeoPoint(BaseModel):
    """Geocoded position of a business."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class Candidate(BaseModel):
    """A business discovered from a source connector, before enrichment."""

    model_config = ConfigDict(frozen=True)

    place_id: str = Field(description="Identifier assigned by the discovery source")
    name: str = Field(description="Display name")
    types: list[str] = Field(default_factory=list, description="Category tags")
    primary_type: Optional[str] = Field(default=None, description="Declared primary category")
    business_status: Optional[str] = None

    # Contact fields
    national_phone_number: Optional[str] = None
    international_phone_number: Optional[str] = None
    website_uri: Optional[str] = None
    google_maps_uri: Optional[str] = None

    # Geocoded address
    formatted_address: Optional[str] = None
    location: Optional[GeoPoint] = None

    # Reputation
    rating: Optional[float] = None
    user_rating_count: Optional[int] = None
    reviews: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_place(cls, place: dict[str, Any]) -> "Candidate":
        """Build a candidate from a Places API (v1) place object."""
        display_name = place.get("displayName") or {}
        location = place.get("location")

        return cls(
            place_id=place.get("id") or "",
            name=display_name.get("text") or place.get("name") or "",
            types=place.get("types") or [],
            primary_type=place.get("primaryType"),
            business_status=place.get("businessStatus"),
            national_phone_number=place.get("nationalPhoneNumber"),
            international_phone_number=place.get("internationalPhoneNumber"),
            website_uri=place.get("websiteUri"),
            google_maps_uri=place.get("googleMapsUri"),
            formatted_address=place.get("formattedAddress"),
            location=GeoPoint(
                latitude=location["latitude"],
                longitude=location["longitude"],
            ) if location else None,
            rating=place.get("rating"),
            user_rating_count=place.get("userRatingCount"),
            reviews=place.get("reviews") or [],
        )

    def categories(self) -> list[str]:
        """Primary type first, then the remaining category tags."""
        ordered = [self.primary_type] if self.primary_type else []
        ordered.extend(t for t in self.types if t not in ordered)
        return ordered


class BusinessFacts(BaseModel):
    """Facts about a business handed to the website inspector and insight prompt."""

    name: str
    website: Optional[str] = None
    address: Optional[str] = None
    types: list[str] = Field(default_factory=list)
    primary_type: Optional[str] = None
    has_ssl: bool = False

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> "BusinessFacts":
        return cls(
            name=candidate.name,
            website=candidate.website_uri,
            address=candidate.formatted_address,
            types=list(candidate.types),
            primary_type=candidate.primary_type,
        )
