"""SQLAlchemy database models and setup."""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    Text,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker

from leadscout.config import settings

Base = declarative_base()


class DBLead(Base):
    """Stored scored lead, one document per enriched candidate."""

    __tablename__ = "leads"

    id = Column(String(32), primary_key=True)
    search_key = Column(String(500), nullable=False)
    place_id = Column(String(255))
    name = Column(String(500), nullable=False)

    general_percent = Column(Integer, nullable=False, default=0)
    marketing_percent = Column(Integer, nullable=False, default=0)

    candidate = Column(Text, nullable=False)  # JSON Candidate
    enrichment = Column(Text, nullable=False)  # JSON EnrichmentResult
    score = Column(Text, nullable=False)  # JSON LeadScore

    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("idx_lead_search_key", "search_key"),
        Index("idx_lead_place", "place_id"),
        Index("idx_lead_general", "general_percent"),
    )


class DBSearchRecord(Base):
    """Per-query accumulator."""

    __tablename__ = "search_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(500), unique=True, nullable=False, index=True)
    lead_ids = Column(Text, nullable=False, default="[]")  # JSON array, sorted
    invocation_count = Column(Integer, default=0)
    result_count = Column(Integer, default=0)
    continuation_token = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)


class DBPromptTemplate(Base):
    """Category-specific insight prompt, versioned."""

    __tablename__ = "prompt_templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (Index("idx_template_category", "category", "active"),)


# Database initialization
def init_db(db_url: Optional[str] = None) -> sessionmaker:
    """Initialize database and return session maker."""
    url = db_url or settings.database_url
    engine = create_engine(url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
