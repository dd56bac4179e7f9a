"""API routes."""

from .documents import router as documents_router
from .versions import router as versions_router

__all__ = [
    "documents_router",
    "versions_router",
]
