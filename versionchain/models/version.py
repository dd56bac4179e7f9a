"""Version model."""

from sqlalchemy import Boolean, Column, Index, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from ..database import Base


class Version(Base):
    """Version chain table: one immutable row per saved state."""

    __tablename__ = "versions"
    __table_args__ = (
        # Two writers racing on the same document collide here instead of forking the chain.
        UniqueConstraint("document_id", "version", name="uq_versions_document_version"),
        Index("ix_versions_timestamp", "timestamp"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Foreign key to document
    document_id = Column(String(100), ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    version = Column(Integer, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)

    # Payload: full content for baselines, serialized op list for deltas
    is_baseline = Column(Boolean, nullable=False)
    content = Column(Text, nullable=True)
    delta = Column(Text, nullable=True)

    summary = Column(String(255), nullable=False, default="")
    size = Column(Integer, nullable=False, default=0)

    # Relationship
    document = relationship("Document", back_populates="versions")
