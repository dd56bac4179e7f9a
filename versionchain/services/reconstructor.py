"""Rebuild historical content from a version chain."""

import logging
from typing import Dict, List, Optional, Sequence

from ..exceptions import CorruptDeltaError, MissingBaselineError
from ..schemas.version import VersionRecord
from .delta_codec import DeltaCodec

logger = logging.getLogger(__name__)


def sort_chain(chain: Sequence[VersionRecord]) -> List[VersionRecord]:
    """Return the chain ordered by version. Duplicate versions make it malformed."""
    ordered = sorted(chain, key=lambda record: record.version)
    for previous, current in zip(ordered, ordered[1:]):
        if previous.version == current.version:
            raise CorruptDeltaError(
                "Chain contains the same version twice",
                version=current.version,
                document_id=current.document_id,
            )
    return ordered


class Reconstructor:
    """Replays deltas forward from the nearest baseline."""

    def __init__(self, codec: DeltaCodec):
        self.codec = codec

    def reconstruct(self, chain: Sequence[VersionRecord], target_version: int) -> str:
        """Return the content of ``target_version``.

        Raises:
            MissingBaselineError: no baseline at or before the target, or the
                target version is not in the chain.
            CorruptDeltaError: a delta fails to replay.
        """
        baseline: Optional[VersionRecord] = None
        deltas: List[VersionRecord] = []
        found_target = False

        for record in sort_chain(chain):
            if record.version > target_version:
                break
            found_target = record.version == target_version
            if record.is_baseline:
                baseline = record
                deltas = []
            elif baseline is not None:
                deltas.append(record)

        if baseline is None or not found_target:
            document_id = chain[0].document_id if chain else None
            raise MissingBaselineError(target_version, document_id)

        logger.debug(
            "Replaying chain",
            extra={"baseline": baseline.version, "target": target_version, "deltas": len(deltas)},
        )

        content = baseline.content
        for record in deltas:
            content = self._replay(content, record)
        return content

    def reconstruct_all(self, chain: Sequence[VersionRecord]) -> Dict[int, str]:
        """Return the content of every version in one forward pass.

        Raises:
            MissingBaselineError: the chain starts with a delta.
            CorruptDeltaError: a delta fails to replay.
        """
        contents: Dict[int, str] = {}
        content: Optional[str] = None

        for record in sort_chain(chain):
            if record.is_baseline:
                content = record.content
            elif content is None:
                raise MissingBaselineError(record.version, record.document_id)
            else:
                content = self._replay(content, record)
            contents[record.version] = content

        return contents

    def _replay(self, content: str, record: VersionRecord) -> str:
        try:
            return self.codec.apply(content, self.codec.deserialize(record.delta))
        except CorruptDeltaError as e:
            e.details.setdefault("version", record.version)
            e.details.setdefault("document_id", record.document_id)
            raise
