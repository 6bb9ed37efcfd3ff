"""SQLAlchemy-backed stores for leads, search records and prompt templates."""

import json
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from leadscout.errors import PersistenceFailure
from leadscout.models import (
    Candidate,
    EnrichmentResult,
    LeadScore,
    ScoredLead,
    SearchRecord,
)
from leadscout.models.database import DBLead, DBPromptTemplate, DBSearchRecord

logger = logging.getLogger(__name__)


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """Commit on success, roll back and raise PersistenceFailure on database errors."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Database operation failed: {e}")
        raise PersistenceFailure(str(e)) from e
    finally:
        session.close()


class LeadStore:
    """Persist and load scored leads by id."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def save(self, lead: ScoredLead):
        self.save_all([lead])

    def save_all(self, leads: Sequence[ScoredLead]):
        if not leads:
            return
        with session_scope(self.session_factory) as session:
            for lead in leads:
                session.merge(self._to_row(lead))

    def find_by_key(self, lead_id: str) -> Optional[ScoredLead]:
        with session_scope(self.session_factory) as session:
            row = session.get(DBLead, lead_id)
            return self._from_row(row) if row else None

    def find_by_ids(self, lead_ids: Sequence[str]) -> list[ScoredLead]:
        """Load leads in the order of lead_ids; unknown ids are skipped."""
        if not lead_ids:
            return []
        with session_scope(self.session_factory) as session:
            rows = session.query(DBLead).filter(DBLead.id.in_(list(lead_ids))).all()
            by_id = {row.id: self._from_row(row) for row in rows}
        return [by_id[i] for i in lead_ids if i in by_id]

    @staticmethod
    def _to_row(lead: ScoredLead) -> DBLead:
        return DBLead(
            id=lead.id,
            search_key=lead.search_key,
            place_id=lead.candidate.place_id,
            name=lead.candidate.name,
            general_percent=lead.score.general_percent,
            marketing_percent=lead.score.marketing_percent,
            candidate=lead.candidate.model_dump_json(),
            enrichment=lead.enrichment.model_dump_json(),
            score=lead.score.model_dump_json(),
            created_at=lead.created_at,
        )

    @staticmethod
    def _from_row(row: DBLead) -> ScoredLead:
        return ScoredLead(
            id=row.id,
            search_key=row.search_key,
            candidate=Candidate.model_validate_json(row.candidate),
            enrichment=EnrichmentResult.model_validate_json(row.enrichment),
            score=LeadScore.model_validate_json(row.score),
            created_at=row.created_at,
        )


class SearchRecordStore:
    """Persist search records keyed by canonical query."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def find_by_key(self, key: str) -> Optional[SearchRecord]:
        with session_scope(self.session_factory) as session:
            row = session.query(DBSearchRecord).filter(DBSearchRecord.key == key).first()
            return self._from_row(row) if row else None

    def save(self, record: SearchRecord):
        """Insert or update the record for record.key."""
        with session_scope(self.session_factory) as session:
            row = session.query(DBSearchRecord).filter(DBSearchRecord.key == record.key).first()
            if row is None:
                row = DBSearchRecord(key=record.key, created_at=record.created_at)
                session.add(row)
            row.lead_ids = json.dumps(record.lead_ids)
            row.invocation_count = record.invocation_count
            row.result_count = record.result_count
            row.continuation_token = record.continuation_token
            row.updated_at = record.updated_at

    def list_all(self) -> list[SearchRecord]:
        with session_scope(self.session_factory) as session:
            rows = session.query(DBSearchRecord).order_by(DBSearchRecord.updated_at.desc()).all()
            return [self._from_row(row) for row in rows]

    @staticmethod
    def _from_row(row: DBSearchRecord) -> SearchRecord:
        return SearchRecord(
            key=row.key,
            lead_ids=json.loads(row.lead_ids or "[]"),
            invocation_count=row.invocation_count or 0,
            result_count=row.result_count or 0,
            continuation_token=row.continuation_token,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class PromptTemplateStore:
    """Versioned insight prompts per business category."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def find_active(self, category: str) -> Optional[str]:
        """Latest active template content for category, if any."""
        with session_scope(self.session_factory) as session:
            row = (
                session.query(DBPromptTemplate)
                .filter(DBPromptTemplate.category == category, DBPromptTemplate.active.is_(True))
                .order_by(DBPromptTemplate.version.desc())
                .first()
            )
            return row.content if row else None

    def add(self, category: str, content: str) -> int:
        """Store a new active version for category, retiring older ones. Returns the version."""
        with session_scope(self.session_factory) as session:
            existing = (
                session.query(DBPromptTemplate)
                .filter(DBPromptTemplate.category == category)
                .all()
            )
            version = max((t.version for t in existing), default=0) + 1
            for template in existing:
                template.active = False
            session.add(DBPromptTemplate(
                category=category,
                content=content,
                version=version,
                active=True,
                created_at=datetime.utcnow(),
            ))
        logger.info(f"Stored prompt template for {category!r} (version {version})")
        return version
