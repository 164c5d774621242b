"""
Document models

One logical ``Document`` per (collection, id) plus any number of
``DocumentLocaleVersion`` rows, one per (locale, draft flag). The canonical
locale row is the source of truth for translation fan-out; other locale rows
are derived and normally held as drafts until a person publishes them.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.database import Base


class DocumentStatus(str, enum.Enum):
    """Publication status of the canonical document."""

    draft = "draft"
    published = "published"


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    collection = Column(String(50), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=DocumentStatus.draft.value)
    published_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    versions = relationship(
        "DocumentLocaleVersion",
        back_populates="document",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (Index("idx_documents_collection_status", "collection", "status"),)


class DocumentLocaleVersion(Base):
    """Field values of a document in one locale, either the live copy or a draft."""

    __tablename__ = "document_locale_versions"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(
        Integer,
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    locale = Column(String(10), nullable=False)  # e.g. "en", "bg"
    is_draft = Column(Boolean, nullable=False, default=False)
    data = Column(JSON, nullable=False, default=dict)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    document = relationship("Document", back_populates="versions")

    __table_args__ = (
        # One live copy and at most one draft per (document, locale)
        UniqueConstraint("document_id", "locale", "is_draft", name="uq_document_locale_draft"),
        Index("idx_dlv_document_locale", "document_id", "locale"),
    )
