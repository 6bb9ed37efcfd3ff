"""API routes for lead search and stored results."""

import io
import logging
import re
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from leadscout.errors import DiscoveryFailure, PersistenceFailure
from leadscout.models import SearchRequest, SearchResponse
from leadscout.search import SearchService, canonicalize, write_leads_csv

logger = logging.getLogger(__name__)

router = APIRouter()


class QuerySummary(BaseModel):
    """Stored query without its leads."""
    key: str
    result_count: int
    invocation_count: int
    complete: bool
    updated_at: str


class QueryDetail(QuerySummary):
    """Stored query with its leads, best first."""
    leads: list[dict[str, Any]]


def _service(request: Request) -> SearchService:
    return request.app.state.service


@router.post("/search", response_model=SearchResponse)
async def search(body: SearchRequest, request: Request):
    """Run (or serve from cache) a lead search."""
    if not body.query.strip():
        raise HTTPException(status_code=422, detail="Query must not be blank")

    try:
        return await _service(request).search(body.query, body.desired_count)
    except DiscoveryFailure as e:
        logger.error(f"Search for {body.query!r} failed during discovery: {e}")
        raise HTTPException(status_code=502, detail=f"Discovery failed: {e}")
    except PersistenceFailure as e:
        logger.error(f"Search for {body.query!r} failed to persist: {e}")
        raise HTTPException(status_code=500, detail="Lead store unavailable")


@router.get("/leads/{lead_id}")
async def get_lead(lead_id: str, request: Request):
    """Get one stored lead."""
    lead = _load(lambda: _service(request).cache.leads.find_by_key(lead_id))
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead.as_response()


@router.get("/queries", response_model=list[QuerySummary])
async def list_queries(request: Request):
    """List stored queries, most recently updated first."""
    records = _load(lambda: _service(request).cache.records.list_all())
    return [
        QuerySummary(
            key=r.key,
            result_count=r.result_count,
            invocation_count=r.invocation_count,
            complete=r.is_complete,
            updated_at=r.updated_at.isoformat(),
        )
        for r in records
    ]


@router.get("/queries/{query}", response_model=QueryDetail)
async def get_query(query: str, request: Request):
    """Get a stored query and its leads without running a search."""
    cached = _load(lambda: _service(request).cache.resolve(canonicalize(query)))
    if cached is None:
        raise HTTPException(status_code=404, detail="Query not found")

    record = cached.record
    return QueryDetail(
        key=record.key,
        result_count=record.result_count,
        invocation_count=record.invocation_count,
        complete=record.is_complete,
        updated_at=record.updated_at.isoformat(),
        leads=[lead.as_response() for lead in cached.leads],
    )


@router.get("/queries/{query}/export")
async def export_query(query: str, request: Request):
    """Export a stored query's leads as CSV."""
    key = canonicalize(query)
    cached = _load(lambda: _service(request).cache.resolve(key))
    if cached is None or not cached.leads:
        raise HTTPException(status_code=404, detail="No leads to export")

    output = io.StringIO()
    write_leads_csv(cached.leads, output)
    output.seek(0)

    filename = re.sub(r"[^a-z0-9]+", "_", key).strip("_") or "leads"
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=leads_{filename}.csv"},
    )


def _load(fetch) -> Optional[Any]:
    try:
        return fetch()
    except PersistenceFailure as e:
        logger.error(f"Lead store read failed: {e}")
        raise HTTPException(status_code=500, detail="Lead store unavailable")
