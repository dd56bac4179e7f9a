"""Version chain schemas.

These are the persisted shapes of the engine: a ``VersionRecord`` per saved
state, and the ``DeltaOp`` entries that make up a serialized delta payload.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field, model_validator


class ChangeKind(str, Enum):
    """Edit operation kind. The value is the one-character wire tag."""
    ADDED = "a"
    REMOVED = "r"
    UNCHANGED = "u"


class VersionKind(str, Enum):
    """How a version's payload is stored."""
    BASELINE = "baseline"
    DELTA = "delta"


class DeltaOp(BaseModel):
    """One compressed edit operation: ``{"t": "u", "v": "Hello"}`` on the wire."""
    kind: ChangeKind = Field(alias="t")
    value: str = Field(alias="v")

    model_config = {"frozen": True, "populate_by_name": True}


class VersionRecord(BaseModel):
    """One immutable entry of a document's version chain.

    Exactly one payload field is set: ``content`` for baselines, ``delta``
    (the serialized op list) for deltas.
    """
    document_id: str = Field(min_length=1)
    version: int = Field(ge=1)
    timestamp: datetime
    kind: VersionKind
    content: Optional[str] = None
    delta: Optional[str] = None
    summary: str = ""
    size: int = Field(default=0, ge=0)  # Stats only; never recomputed from the payload

    model_config = {"frozen": True, "from_attributes": True}

    @computed_field
    @property
    def is_baseline(self) -> bool:
        return self.kind == VersionKind.BASELINE

    @model_validator(mode="after")
    def check_payload_matches_kind(self) -> "VersionRecord":
        if self.kind == VersionKind.BASELINE:
            if self.content is None or self.delta is not None:
                raise ValueError("Baseline records carry content and no delta")
        elif self.delta is None or self.content is not None:
            raise ValueError("Delta records carry a delta and no content")
        return self


class StorageStats(BaseModel):
    """Size and count metrics over one chain (or a flat union of records)."""
    total_versions: int = 0
    baselines: int = 0
    deltas: int = 0
    total_size: int = 0
    average_delta_size: float = 0.0
    compression_ratio: float = 0.0


class VersionMetadata(BaseModel):
    """Headline facts about a chain."""
    total_versions: int = 0
    current_version: int = 0
    total_size: int = 0
    compression_ratio: float = 0.0
    last_modified: Optional[datetime] = None


class CollectionStats(BaseModel):
    """Storage metrics summed over several documents' chains."""
    total_documents: int = 0
    total_versions: int = 0
    baselines: int = 0
    deltas: int = 0
    total_size: int = 0
    average_delta_size: float = 0.0
    average_compression_ratio: float = 0.0
    most_active_document: Optional[str] = None


class VersionContentResponse(BaseModel):
    """Reconstructed content of one version."""
    document_id: str
    version: int
    content: str


class HistoryEntry(BaseModel):
    """A version with its reconstructed content, as shown in history views."""
    document_id: str
    version: int
    timestamp: datetime
    is_baseline: bool
    summary: str
    content: str


class DocumentStatsResponse(BaseModel):
    """Per-document stats endpoint payload."""
    document_id: str
    storage: StorageStats
    metadata: VersionMetadata


class ExportPayload(BaseModel):
    """Backup of every stored chain."""
    exported_at: datetime
    chains: Dict[str, List[VersionRecord]] = {}
    stats: CollectionStats = CollectionStats()


class ImportRequest(BaseModel):
    """Restore payload; only the chains are read."""
    chains: Dict[str, List[VersionRecord]]


class ImportResult(BaseModel):
    """Outcome of an import: documents restored and per-document failures."""
    imported: int = 0
    errors: List[str] = []
