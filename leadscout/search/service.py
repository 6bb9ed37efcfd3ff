"""Search orchestration: discover, enrich, score, cache."""

import asyncio
import logging
from typing import Optional

from sqlalchemy.orm import sessionmaker

from leadscout.config import settings
from leadscout.connectors import DiscoverySource, GooglePlacesConnector, MockConnector
from leadscout.enrich import InsightAdapter, ServiceProfile, WebsiteInspector, enrich
from leadscout.models import (
    BusinessFacts,
    Candidate,
    EnrichmentResult,
    SearchResponse,
)
from leadscout.score import LeadScorer
from .cache import SearchCache, canonicalize
from .store import LeadStore, PromptTemplateStore, SearchRecordStore

logger = logging.getLogger(__name__)


class SearchService:
    """Run a search end to end, serving complete queries from the cache."""

    def __init__(
        self,
        source: DiscoverySource,
        inspector: WebsiteInspector,
        scorer: LeadScorer,
        cache: SearchCache,
        concurrency: Optional[int] = None,
        max_retries: Optional[int] = None,
        page_token_delay: Optional[float] = None,
    ):
        self.source = source
        self.inspector = inspector
        self.scorer = scorer
        self.cache = cache
        self.concurrency = concurrency
        self.max_retries = max_retries
        self.page_token_delay = (
            settings.page_token_delay if page_token_delay is None else page_token_delay
        )

    async def search(self, query: str, desired_count: Optional[int] = None) -> SearchResponse:
        """Return scored leads for query, best general score first.

        Raises:
            DiscoveryFailure: the candidate source failed; nothing is stored.
            PersistenceFailure: the store could not be read or written.
        """
        key = canonicalize(query)
        wanted = min(desired_count or settings.default_result_count, settings.max_result_count)

        async with self.cache.lock(key):
            existing = self.cache.resolve(key)
            if existing and existing.record.is_complete:
                self.cache.merge(key, [], None)
                logger.info(f"[{key}] Cache hit with {len(existing.leads)} leads")
                return SearchResponse(
                    query=query,
                    leads=[lead.as_response() for lead in existing.leads],
                    cached=True,
                )

            token = existing.record.continuation_token if existing else None
            candidates, next_token = await self._discover(query, token, wanted)
            logger.info(f"[{key}] Discovered {len(candidates)} candidates")

            outcomes = await enrich(
                candidates,
                self._enrich_candidate,
                concurrency=self.concurrency,
                max_retries=self.max_retries,
            )

            leads = []
            for outcome in outcomes:
                enrichment = outcome.result if outcome.ok else EnrichmentResult(error=outcome.error)
                leads.append(self.scorer.score_lead(key, outcome.item, enrichment))

            failed = sum(1 for o in outcomes if not o.ok)
            if failed:
                logger.warning(f"[{key}] {failed}/{len(outcomes)} candidates failed enrichment")

            record = self.cache.merge(key, leads, next_token)
            stored = self.cache.leads.find_by_ids(record.lead_ids)

        return SearchResponse(
            query=query,
            leads=[lead.as_response() for lead in stored],
            cached=False,
        )

    async def _discover(
        self,
        query: str,
        page_token: Optional[str],
        wanted: int,
    ) -> tuple[list[Candidate], Optional[str]]:
        """Page through the source until at least wanted candidates or the last page."""
        candidates: list[Candidate] = []
        token = page_token

        while True:
            page = await self.source.discover(query, token)
            candidates.extend(page.candidates)
            token = page.next_page_token
            if not token or len(candidates) >= wanted:
                break
            # Continuation tokens are not valid immediately after issue
            await asyncio.sleep(self.page_token_delay)

        return candidates, token

    async def _enrich_candidate(self, candidate: Candidate) -> EnrichmentResult:
        facts = BusinessFacts.from_candidate(candidate)
        return await self.inspector.inspect(candidate.website_uri, facts)


def build_service(
    session_factory: sessionmaker,
    use_mock: bool = False,
    concurrency: Optional[int] = None,
    max_retries: Optional[int] = None,
) -> SearchService:
    """Wire a SearchService against the given database."""
    insights = InsightAdapter(
        templates=PromptTemplateStore(session_factory),
        profile=ServiceProfile.from_settings(),
    )
    source = MockConnector() if use_mock else GooglePlacesConnector()
    cache = SearchCache(LeadStore(session_factory), SearchRecordStore(session_factory))

    return SearchService(
        source=source,
        inspector=WebsiteInspector(insights=insights),
        scorer=LeadScorer(),
        cache=cache,
        concurrency=concurrency,
        max_retries=max_retries,
    )
