"""Query-keyed cache of scored leads."""

import asyncio
import logging
import weakref
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from leadscout.models import ScoredLead, SearchRecord
from .store import LeadStore, SearchRecordStore

logger = logging.getLogger(__name__)


def canonicalize(query: str) -> str:
    """Cache key for a query: trimmed, lower-cased, single-spaced."""
    return " ".join(query.split()).lower()


@dataclass
class CachedRecord:
    record: SearchRecord
    leads: list[ScoredLead]


class SearchCache:
    """Accumulate leads per canonical query.

    A record's lead ids stay sorted descending by general percent; ties keep
    the order in which leads were first stored.
    """

    def __init__(self, leads: LeadStore, records: SearchRecordStore):
        self.leads = leads
        self.records = records
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    def lock(self, key: str) -> asyncio.Lock:
        """Per-key lock serializing searches for the same query within this process.

        Locks are held weakly and disappear once no search holds or awaits them.
        """
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def resolve(self, key: str) -> Optional[CachedRecord]:
        """Stored record for key with its leads in record order, or None."""
        record = self.records.find_by_key(key)
        if record is None:
            return None
        return CachedRecord(record=record, leads=self.leads.find_by_ids(record.lead_ids))

    def merge(
        self,
        key: str,
        new_leads: Sequence[ScoredLead],
        continuation_token: Optional[str],
    ) -> SearchRecord:
        """Store new_leads and fold them into the record for key.

        Creates the record on first use. Every call counts as one invocation,
        including an empty merge on a cache hit.
        """
        self.leads.save_all(new_leads)
        record = self.records.find_by_key(key)
        now = datetime.utcnow()

        if record is None:
            ordered = self._rank(new_leads)
            record = SearchRecord(
                key=key,
                lead_ids=[lead.id for lead in ordered],
                invocation_count=1,
                result_count=len(ordered),
                continuation_token=continuation_token,
                created_at=now,
                updated_at=now,
            )
            logger.info(f"[{key}] Created search record with {len(ordered)} leads")
        else:
            lead_ids = list(dict.fromkeys(record.lead_ids + [lead.id for lead in new_leads]))
            ordered = self._rank(self.leads.find_by_ids(lead_ids))
            record = record.model_copy(update={
                "lead_ids": [lead.id for lead in ordered],
                "invocation_count": record.invocation_count + 1,
                "result_count": len(ordered),
                "continuation_token": continuation_token,
                "updated_at": now,
            })
            logger.info(
                f"[{key}] Merged {len(new_leads)} new leads "
                f"({len(ordered)} total, invocation {record.invocation_count})"
            )

        self.records.save(record)
        return record

    @staticmethod
    def _rank(leads: Sequence[ScoredLead]) -> list[ScoredLead]:
        # sorted() is stable with reverse=True
        return sorted(leads, key=lambda lead: lead.score.general_percent, reverse=True)
