"""Website intelligence: reachability, SSL, contact harvesting."""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional
from urllib.parse import urlparse

from leadscout.crawler import ContentExtractor, Fetcher, check_ssl
from leadscout.models import (
    BusinessFacts,
    EnrichmentResult,
    InsightError,
    WebsiteStatus,
)
from .insights import InsightAdapter
from .pagespeed import SpeedAdapter

logger = logging.getLogger(__name__)


@dataclass
class _SiteState:
    """What has been learned so far; survives a mid-inspection failure."""

    final_url: Optional[str]
    status: WebsiteStatus = WebsiteStatus.UNKNOWN
    has_ssl: bool = False
    emails: list[str] = field(default_factory=list)
    linkedin: Optional[str] = None
    error: Optional[str] = None


class WebsiteInspector:
    """Gather everything knowable about a candidate's website.

    Speed and insight adapters run regardless of whether the site could be
    reached, so an unreachable business still gets an insight attempt.
    """

    CONTACT_PATHS = ["contact", "contact-us"]

    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        extractor: Optional[ContentExtractor] = None,
        speed: Optional[SpeedAdapter] = None,
        insights: Optional[InsightAdapter] = None,
        ssl_check: Callable[[str], Awaitable[bool]] = check_ssl,
    ):
        self.fetcher = fetcher or Fetcher()
        self.extractor = extractor or ContentExtractor()
        self.speed = speed or SpeedAdapter()
        self.insights = insights or InsightAdapter()
        self.ssl_check = ssl_check

    async def inspect(
        self,
        url: Optional[str],
        facts: BusinessFacts,
        prompt_override: Optional[str] = None,
    ) -> EnrichmentResult:
        """Inspect url and run the adapters. Never raises for site or adapter errors."""
        state = _SiteState(final_url=url)

        if url:
            state.has_ssl = url.lower().startswith("https://")
            try:
                await self._inspect_site(url, state)
            except Exception as e:
                logger.warning(f"Website inspection failed for {url}: {e}")
                state.error = str(e) or type(e).__name__

        performance = None
        if state.final_url:
            try:
                performance = await self.speed.measure(state.final_url)
            except Exception as e:
                logger.warning(f"Speed measurement crashed for {state.final_url}: {e}")
                state.error = state.error or f"Speed measurement failed: {e}"

        insight_facts = facts.model_copy(update={
            "website": state.final_url,
            "has_ssl": state.has_ssl,
        })
        try:
            insight = await self.insights.analyze(insight_facts, prompt_override)
        except Exception as e:
            logger.warning(f"Insight analysis crashed for {facts.name}: {e}")
            insight = InsightError(error="Insight analysis failed", details=str(e))

        return EnrichmentResult(
            website_status=state.status,
            final_url=state.final_url,
            has_ssl=state.has_ssl,
            emails=state.emails,
            linkedin=state.linkedin,
            performance=performance,
            insight=insight,
            error=state.error,
        )

    async def _inspect_site(self, url: str, state: _SiteState):
        """Reachability, SSL, emails and profile link, recorded into state as they are found."""
        page = await self.fetcher.navigate(url)

        if page.status_code:
            state.final_url = page.final_url
        state.status = WebsiteStatus.ONLINE if page.reachable else WebsiteStatus.UNAVAILABLE
        logger.debug(f"{url} -> {state.final_url} [{page.status_code or page.error}]")

        # SSL: https canonical URL, or a direct handshake on 443
        parsed = urlparse(state.final_url)
        state.has_ssl = parsed.scheme == "https"
        if not state.has_ssl and parsed.hostname:
            state.has_ssl = await self.ssl_check(parsed.hostname)

        if not page.status_code:
            return

        state.emails = self.extractor.find_emails(page.content or "")
        links = self.extractor.anchors(page.content or "", state.final_url)

        if not state.emails:
            site_root = f"{parsed.scheme}://{parsed.netloc}"
            contact_pages = await self.fetcher.fetch_pages(site_root, self.CONTACT_PATHS)
            for contact_url, result in contact_pages.items():
                if not result.reachable or not result.content:
                    logger.debug(f"No contact page at {contact_url}: {result.error or result.status_code}")
                    continue
                state.emails = self.extractor.merge_emails(
                    state.emails,
                    self.extractor.find_emails(result.content),
                    self.extractor.mailto_targets(result.content),
                )
                links.extend(self.extractor.anchors(result.content, result.final_url))

        state.linkedin = self.extractor.find_linkedin(links)
