"""Document schemas."""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class DocumentSave(BaseModel):
    """Schema for saving a new content state of a document."""
    content: str
    # Optimistic locking: the version the caller last saw; omit to skip the check.
    expected_version: Optional[int] = Field(default=None, ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "content": "Dear diary,\n\nToday the delta chain held up.",
                    "expected_version": 3,
                }
            ]
        }
    }


class DocumentListResponse(BaseModel):
    """Schema for document list entries (no content)."""
    id: str
    current_version: int
    total_versions: int
    storage_size: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DocumentResponse(DocumentListResponse):
    """Schema for a single document with its current content."""
    content: str
