"""Document model."""

from sqlalchemy import Column, Index, String, Integer, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class Document(Base):
    """One row per document; the content itself lives in its version chain."""

    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_updated_at", "updated_at"),
    )

    # Primary key (opaque, supplied by the caller)
    id = Column(String(100), primary_key=True)

    # Chain counters, updated on every save
    current_version = Column(Integer, default=0, nullable=False)
    total_versions = Column(Integer, default=0, nullable=False)
    storage_size = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    versions = relationship(
        "Version",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Version.version",
    )
