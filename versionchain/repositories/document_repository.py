"""Document repository for database operations."""

from typing import List

from ..models import Document
from ..exceptions import DocumentNotFoundError
from ..schemas.version import VersionRecord
from .base import BaseRepository


class DocumentRepository(BaseRepository[Document]):
    """Repository for document rows and their chain counters."""

    model_class = Document
    not_found_error = DocumentNotFoundError

    def get_or_create(self, document_id: str) -> Document:
        """Fetch a document row, creating an empty one on first save."""
        document = self.get_by_id_optional(document_id)
        if document is None:
            document = Document(id=document_id, current_version=0, total_versions=0, storage_size=0)
            self.db.add(document)
            self.db.flush()
        return document

    def record_version(self, document: Document, record: VersionRecord) -> Document:
        """Advance the counters after ``record`` was appended to the chain."""
        document.current_version = max(document.current_version or 0, record.version)
        document.total_versions = (document.total_versions or 0) + 1
        document.storage_size = (document.storage_size or 0) + record.size
        document.updated_at = record.timestamp
        self.db.flush()
        return document

    def get_all(self, skip: int = 0, limit: int = 100) -> List[Document]:
        """List documents, most recently updated first."""
        return (
            self.db.query(Document)
            .order_by(Document.updated_at.desc(), Document.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self) -> int:
        return self.db.query(Document).count()

    def delete(self, document_id: str) -> bool:
        """Delete a document and, by cascade, its chain. Idempotent."""
        document = self.get_by_id_optional(document_id)
        if document is None:
            return False
        self.db.delete(document)
        self.db.flush()
        return True
