"""Document API endpoints."""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import List

from ..database import get_db
from ..schemas.document import DocumentListResponse, DocumentResponse, DocumentSave
from ..schemas.version import (
    CollectionStats,
    DocumentStatsResponse,
    ExportPayload,
    ImportRequest,
    ImportResult,
    VersionRecord,
)
from ..services import VersionService

router = APIRouter(prefix="/api", tags=["documents"])


@router.get("/docs", response_model=List[DocumentListResponse])
def list_documents(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """List documents, most recently updated first."""
    return VersionService(db).list_documents(skip, limit)


@router.get("/docs/{doc_id}", response_model=DocumentResponse)
def get_document(doc_id: str, db: Session = Depends(get_db)):
    """Get a document with its current content."""
    return VersionService(db).get_document(doc_id)


@router.put("/docs/{doc_id}", response_model=VersionRecord, status_code=201)
def save_document(doc_id: str, body: DocumentSave, db: Session = Depends(get_db)):
    """Save a new content state; returns the version record that was stored."""
    return VersionService(db).save_content(doc_id, body.content, body.expected_version)


@router.delete("/docs/{doc_id}", status_code=204)
def delete_document(doc_id: str, db: Session = Depends(get_db)):
    """Delete a document and its whole version chain. Idempotent."""
    VersionService(db).delete_document(doc_id)
    return Response(status_code=204)


@router.get("/docs/{doc_id}/stats", response_model=DocumentStatsResponse)
def get_document_stats(doc_id: str, db: Session = Depends(get_db)):
    """Storage stats and metadata of one document's chain."""
    service = VersionService(db)
    return DocumentStatsResponse(
        document_id=doc_id,
        storage=service.get_storage_stats(doc_id),
        metadata=service.get_version_metadata(doc_id),
    )


@router.get("/stats", response_model=CollectionStats)
def get_collection_stats(db: Session = Depends(get_db)):
    """Storage stats over every document."""
    return VersionService(db).get_collection_stats()


@router.get("/export", response_model=ExportPayload)
def export_all(db: Session = Depends(get_db)):
    """Export every chain as stored."""
    return VersionService(db).export_all()


@router.post("/import", response_model=ImportResult)
def import_data(body: ImportRequest, db: Session = Depends(get_db)):
    """Restore chains from an export."""
    return VersionService(db).import_data(body)
