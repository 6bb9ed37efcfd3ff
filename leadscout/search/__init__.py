"""Query cache, persistence and search orchestration."""

from .cache import CachedRecord, SearchCache, canonicalize
from .export import write_leads_csv
from .service import SearchService, build_service
from .store import LeadStore, PromptTemplateStore, SearchRecordStore

__all__ = [
    "CachedRecord",
    "SearchCache",
    "canonicalize",
    "write_leads_csv",
    "SearchService",
    "build_service",
    "LeadStore",
    "PromptTemplateStore",
    "SearchRecordStore",
]
