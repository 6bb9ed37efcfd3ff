"""Enrichment pipeline for candidate businesses."""

from .pool import EnrichmentOutcome, EnrichmentWorkerPool, enrich
from .pagespeed import SpeedAdapter
from .insights import InsightAdapter, ServiceProfile
from .inspector import WebsiteInspector

__all__ = [
    "EnrichmentOutcome",
    "EnrichmentWorkerPool",
    "enrich",
    "SpeedAdapter",
    "InsightAdapter",
    "ServiceProfile",
    "WebsiteInspector",
]
