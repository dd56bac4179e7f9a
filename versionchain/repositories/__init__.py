"""Data access repositories."""

from .base import BaseRepository
from .document_repository import DocumentRepository
from .version_repository import VersionRepository

__all__ = [
    "BaseRepository",
    "DocumentRepository",
    "VersionRepository",
]
