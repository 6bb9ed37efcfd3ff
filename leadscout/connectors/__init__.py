"""Discovery sources for finding candidate businesses."""

from .base import DiscoveryPage, DiscoverySource
from .google_places import GooglePlacesConnector
from .mock import MockConnector

__all__ = [
    "DiscoveryPage",
    "DiscoverySource",
    "GooglePlacesConnector",
    "MockConnector",
]
