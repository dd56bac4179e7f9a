"""Version API endpoints."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from typing import List

from ..database import get_db
from ..schemas.version import HistoryEntry, VersionContentResponse, VersionRecord
from ..services import VersionService

router = APIRouter(prefix="/api/docs/{doc_id}", tags=["versions"])


@router.get("/versions", response_model=List[VersionRecord])
def list_versions(doc_id: str, db: Session = Depends(get_db)):
    """List the stored records of a document's chain, oldest first."""
    return VersionService(db).get_chain(doc_id)


@router.get("/versions/{version}", response_model=VersionContentResponse)
def get_version_content(
    doc_id: str,
    version: int = Path(..., ge=1),
    db: Session = Depends(get_db),
):
    """Reconstruct the content of one version."""
    content = VersionService(db).get_content_at(doc_id, version)
    return VersionContentResponse(document_id=doc_id, version=version, content=content)


@router.get("/history", response_model=List[HistoryEntry])
def get_history(doc_id: str, db: Session = Depends(get_db)):
    """Every version with its reconstructed content, newest first."""
    return VersionService(db).get_history(doc_id)
