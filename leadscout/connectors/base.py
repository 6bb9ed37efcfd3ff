"""Abstract base class for discovery sources."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from leadscout.models import Candidate


@dataclass
class DiscoveryPage:
    """One page of candidates plus the token for the next page, if any."""

    candidates: list[Candidate] = field(default_factory=list)
    next_page_token: Optional[str] = None


class DiscoverySource(ABC):
    """Abstract interface for business discovery sources."""

    name: str = "base"

    @abstractmethod
    async def discover(self, query: str, page_token: Optional[str] = None) -> DiscoveryPage:
        """
        Find businesses matching a free-text query.

        Args:
            query: Free-text search, e.g. "plumbers in Austin"
            page_token: Continuation token from a previous page

        Returns:
            The page of candidates found

        Raises:
            DiscoveryFailure: the source could not be queried
        """
        pass
