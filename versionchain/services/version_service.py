"""Version service - persistence around the version engine.

Owns the save path (read chain, rebuild the latest content, pick the next
version number, create and append the record) and every read that needs
both the database and the engine. The engine never sees a session; this
service never touches delta payloads.

Writes for one document are serialized in-process by a per-document lock;
the (document_id, version) unique constraint catches writers in other
processes.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

import sqlalchemy.exc
from sqlalchemy.orm import Session

from ..core.config import settings
from ..exceptions import (
    DatabaseError,
    DocumentNotFoundError,
    ValidationError,
    VersionChainError,
    VersionConflictError,
)
from ..repositories import DocumentRepository, VersionRepository
from ..schemas.document import DocumentListResponse, DocumentResponse
from ..schemas.version import (
    CollectionStats,
    ExportPayload,
    HistoryEntry,
    ImportRequest,
    ImportResult,
    StorageStats,
    VersionMetadata,
    VersionRecord,
)
from .version_engine import VersionEngine

logger = logging.getLogger(__name__)

_document_locks: Dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(document_id: str) -> threading.Lock:
    with _locks_guard:
        lock = _document_locks.get(document_id)
        if lock is None:
            lock = _document_locks[document_id] = threading.Lock()
        return lock


def _release_lock(document_id: str) -> None:
    with _locks_guard:
        _document_locks.pop(document_id, None)


class VersionService:
    """Stores and reads document version chains."""

    def __init__(self, db: Session, engine: Optional[VersionEngine] = None):
        self.db = db
        self.engine = engine or VersionEngine.from_settings(settings)
        self.doc_repo = DocumentRepository(db)
        self.version_repo = VersionRepository(db)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save_content(
        self,
        document_id: str,
        content: str,
        expected_version: Optional[int] = None,
    ) -> VersionRecord:
        """Append the next version of a document and return its record.

        When ``expected_version`` is given it must equal the document's
        current version (0 for a new document), otherwise the save is
        rejected with VersionConflictError.
        """
        if not document_id or not document_id.strip():
            raise ValidationError("Document ID must not be empty", field="document_id")

        with _lock_for(document_id):
            latest = self.version_repo.get_latest(document_id)
            current_version = latest.version if latest else 0

            if expected_version is not None and expected_version != current_version:
                raise VersionConflictError(document_id, current_version)

            previous_content = ""
            if latest is not None:
                chain = self.version_repo.get_chain(document_id)
                previous_content = self.engine.reconstruct_content(chain, current_version)
            record = self.engine.create_version(
                document_id, content, previous_content, current_version + 1
            )

            document = self.doc_repo.get_or_create(document_id)
            self.version_repo.append(record)
            self.doc_repo.record_version(document, record)
            self._commit()

        logger.info(
            "Saved version",
            extra={
                "document_id": document_id,
                "version": record.version,
                "is_baseline": record.is_baseline,
                "size": record.size,
            },
        )
        return record

    def delete_document(self, document_id: str) -> bool:
        """Delete a document and its whole chain. Idempotent."""
        with _lock_for(document_id):
            removed_versions = self.version_repo.delete_chain(document_id)
            deleted = self.doc_repo.delete(document_id)
            self._commit()
        _release_lock(document_id)
        if deleted:
            logger.info(
                "Deleted document",
                extra={"document_id": document_id, "versions": removed_versions},
            )
        return deleted

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_documents(self, skip: int = 0, limit: int = 100) -> List[DocumentListResponse]:
        """List documents without content."""
        return [
            DocumentListResponse.model_validate(document)
            for document in self.doc_repo.get_all(skip, limit)
        ]

    def get_current_content(self, document_id: str) -> str:
        """Content of the latest version."""
        document = self.doc_repo.get_by_id(document_id)
        chain = self.version_repo.get_chain(document_id)
        return self.engine.reconstruct_content(chain, document.current_version)

    def get_document(self, document_id: str) -> DocumentResponse:
        """Get a document with its current content rebuilt from the chain."""
        content = self.get_current_content(document_id)
        document = self.doc_repo.get_by_id(document_id)
        return DocumentResponse(
            id=document.id,
            current_version=document.current_version,
            total_versions=document.total_versions,
            storage_size=document.storage_size,
            created_at=document.created_at,
            updated_at=document.updated_at,
            content=content,
        )

    def get_chain(self, document_id: str) -> List[VersionRecord]:
        """Raw records of a document, ascending. Raises DocumentNotFoundError."""
        self.doc_repo.get_by_id(document_id)
        return self.version_repo.get_chain(document_id)

    def get_content_at(self, document_id: str, version: int) -> str:
        """Content of one historical version."""
        return self.engine.reconstruct_content(self.get_chain(document_id), version)

    def get_history(self, document_id: str) -> List[HistoryEntry]:
        """Every version with its content, newest first."""
        chain = self.get_chain(document_id)
        contents = self.engine.reconstructor.reconstruct_all(chain)
        return [
            HistoryEntry(
                document_id=record.document_id,
                version=record.version,
                timestamp=record.timestamp,
                is_baseline=record.is_baseline,
                summary=record.summary,
                content=contents[record.version],
            )
            for record in reversed(chain)
        ]

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_storage_stats(self, document_id: Optional[str] = None) -> StorageStats:
        """Stats for one document, or for every stored record combined."""
        if document_id is None:
            return self.engine.storage_stats(self.version_repo.get_all_records())
        return self.engine.storage_stats(self.get_chain(document_id))

    def get_version_metadata(self, document_id: str) -> VersionMetadata:
        return self.engine.version_metadata(self.get_chain(document_id))

    def get_collection_stats(self) -> CollectionStats:
        """Per-document stats summed over all documents."""
        return self.engine.stats_calculator.aggregate(self.version_repo.get_all_chains())

    # ------------------------------------------------------------------
    # Backup
    # ------------------------------------------------------------------

    def export_all(self) -> ExportPayload:
        """Snapshot every chain as stored, with collection stats."""
        chains = self.version_repo.get_all_chains()
        return ExportPayload(
            exported_at=datetime.now(timezone.utc),
            chains=chains,
            stats=self.engine.stats_calculator.aggregate(chains),
        )

    def import_data(self, payload: ImportRequest) -> ImportResult:
        """Restore chains from an export.

        Each chain is checked by rebuilding every version before anything is
        written. A failing document is reported and skipped; the others are
        still imported.
        """
        result = ImportResult()

        for document_id, chain in payload.chains.items():
            try:
                self._import_chain(document_id, chain)
            except VersionChainError as e:
                self.db.rollback()
                logger.warning(
                    "Import of document failed",
                    extra={"document_id": document_id, "error_code": e.error_code.value},
                )
                result.errors.append(f"Failed to import document {document_id}: {e.message}")
            else:
                result.imported += 1

        logger.info("Import finished", extra={"imported": result.imported, "failed": len(result.errors)})
        return result

    def _import_chain(self, document_id: str, chain: List[VersionRecord]) -> None:
        if not chain:
            raise ValidationError(f"Chain for {document_id} is empty", field="chains")
        if any(record.document_id != document_id for record in chain):
            raise ValidationError(
                f"Chain for {document_id} contains records of another document", field="chains"
            )

        with _lock_for(document_id):
            if self.doc_repo.get_by_id_optional(document_id) is not None:
                raise VersionConflictError(
                    document_id, 0, message=f"Document {document_id} already exists"
                )

            ordered = self.engine.optimize_version_history(chain)
            self.engine.reconstructor.reconstruct_all(ordered)

            document = self.doc_repo.get_or_create(document_id)
            for record in ordered:
                self.version_repo.append(record)
                self.doc_repo.record_version(document, record)
            self._commit()

    def _commit(self) -> None:
        try:
            self.db.commit()
        except sqlalchemy.exc.SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Commit failed", exc_info=True)
            raise DatabaseError("Failed to save changes", original_error=e) from e
