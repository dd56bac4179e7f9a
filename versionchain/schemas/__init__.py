"""Pydantic schemas."""

from .version import (
    ChangeKind,
    VersionKind,
    DeltaOp,
    VersionRecord,
    StorageStats,
    VersionMetadata,
    CollectionStats,
)
from .document import DocumentSave, DocumentListResponse, DocumentResponse

__all__ = [
    "ChangeKind", "VersionKind", "DeltaOp", "VersionRecord",
    "StorageStats", "VersionMetadata", "CollectionStats",
    "DocumentSave", "DocumentListResponse", "DocumentResponse",
]
