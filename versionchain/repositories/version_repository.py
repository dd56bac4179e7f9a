"""Version repository for database operations.

Stores engine ``VersionRecord``s as rows and hands them back as records,
so nothing above this layer sees SQLAlchemy objects.
"""

from collections import defaultdict
from typing import Dict, List, Optional

import sqlalchemy.exc
from sqlalchemy.orm import Session

from ..models import Version
from ..exceptions import VersionConflictError
from ..schemas.version import VersionKind, VersionRecord


def to_record(row: Version) -> VersionRecord:
    """Convert a version row to an engine record."""
    return VersionRecord(
        document_id=row.document_id,
        version=row.version,
        timestamp=row.timestamp,
        kind=VersionKind.BASELINE if row.is_baseline else VersionKind.DELTA,
        content=row.content if row.is_baseline else None,
        delta=None if row.is_baseline else row.delta,
        summary=row.summary or "",
        size=row.size or 0,
    )


class VersionRepository:
    """Repository for version chain rows."""

    def __init__(self, db: Session):
        self.db = db

    def append(self, record: VersionRecord) -> Version:
        """Insert a record. Raises VersionConflictError if the version is taken.

        A conflict rolls back the session's open transaction.
        """
        row = Version(
            document_id=record.document_id,
            version=record.version,
            timestamp=record.timestamp,
            is_baseline=record.is_baseline,
            content=record.content,
            delta=record.delta,
            summary=record.summary,
            size=record.size,
        )
        try:
            self.db.add(row)
            self.db.flush()
        except sqlalchemy.exc.IntegrityError as e:
            self.db.rollback()
            raise VersionConflictError(
                record.document_id,
                record.version,
                message=f"Version {record.version} already exists",
            ) from e
        return row

    def get_chain(self, document_id: str) -> List[VersionRecord]:
        """Get a document's full chain, ascending by version."""
        rows = (
            self.db.query(Version)
            .filter(Version.document_id == document_id)
            .order_by(Version.version)
            .all()
        )
        return [to_record(row) for row in rows]

    def get_latest(self, document_id: str) -> Optional[VersionRecord]:
        """Get the highest-numbered version of a document."""
        row = (
            self.db.query(Version)
            .filter(Version.document_id == document_id)
            .order_by(Version.version.desc())
            .first()
        )
        return to_record(row) if row else None

    def get_all_records(self) -> List[VersionRecord]:
        """Every stored record across all documents."""
        rows = self.db.query(Version).order_by(Version.document_id, Version.version).all()
        return [to_record(row) for row in rows]

    def get_all_chains(self) -> Dict[str, List[VersionRecord]]:
        """All chains keyed by document ID."""
        chains: Dict[str, List[VersionRecord]] = defaultdict(list)
        for record in self.get_all_records():
            chains[record.document_id].append(record)
        return dict(chains)

    def delete_chain(self, document_id: str) -> int:
        """Delete every version of a document. Returns the number of rows removed."""
        deleted = (
            self.db.query(Version)
            .filter(Version.document_id == document_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return deleted
