"""Version engine - the single entry point to the version-chain storage engine.

Wires DiffEngine, DeltaCodec, BaselinePolicy, Reconstructor and
StatsCalculator together for one configuration. Every method is a pure
function of its arguments; the engine holds no per-document state, so one
instance can be shared freely. Callers must still serialize writes per
document: version numbers are supplied from outside and drive both the
baseline decision and reconstruction.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from ..core.config import Settings
from ..exceptions import ValidationError
from ..schemas.version import StorageStats, VersionKind, VersionMetadata, VersionRecord
from .baseline_policy import (
    DEFAULT_BASELINE_INTERVAL,
    DEFAULT_MAX_DELTA_SIZE,
    BaselinePolicy,
)
from .delta_codec import DeltaCodec
from .diff_engine import DiffEngine
from .reconstructor import Reconstructor, sort_chain
from .stats_calculator import StatsCalculator

logger = logging.getLogger(__name__)


class VersionEngine:
    """Creates version records and reads content back out of chains."""

    def __init__(
        self,
        baseline_interval: int = DEFAULT_BASELINE_INTERVAL,
        max_delta_size: int = DEFAULT_MAX_DELTA_SIZE,
        diff_timeout: float = 0.0,
    ):
        self.diff_engine = DiffEngine(timeout=diff_timeout)
        self.codec = DeltaCodec()
        self.policy = BaselinePolicy(
            self.diff_engine,
            self.codec,
            baseline_interval=baseline_interval,
            max_delta_size=max_delta_size,
        )
        self.reconstructor = Reconstructor(self.codec)
        self.stats_calculator = StatsCalculator()

    @classmethod
    def from_settings(cls, settings: Settings) -> "VersionEngine":
        return cls(
            baseline_interval=settings.baseline_interval,
            max_delta_size=settings.max_delta_size,
            diff_timeout=settings.diff_timeout,
        )

    @property
    def baseline_interval(self) -> int:
        return self.policy.baseline_interval

    @property
    def max_delta_size(self) -> int:
        return self.policy.max_delta_size

    def create_version(
        self,
        document_id: str,
        new_content: str,
        previous_content: str,
        version: int,
        timestamp: Optional[datetime] = None,
    ) -> VersionRecord:
        """Build the record for ``version`` of a document.

        Stores ``new_content`` in full when the baseline policy says so,
        otherwise the delta from ``previous_content``.

        Raises:
            ValidationError: empty document ID or version below 1.
            SizeMeasurementError: measuring the candidate delta failed.
        """
        if not document_id:
            raise ValidationError("Document ID must not be empty", field="document_id")
        if version < 1:
            raise ValidationError("Version must be >= 1", field="version")

        timestamp = timestamp or datetime.now(timezone.utc)
        decision = self.policy.evaluate(version, new_content, previous_content)

        if decision.is_baseline:
            logger.debug(
                "Storing baseline",
                extra={"document_id": document_id, "version": version, "reason": decision.reason.value},
            )
            return VersionRecord(
                document_id=document_id,
                version=version,
                timestamp=timestamp,
                kind=VersionKind.BASELINE,
                content=new_content,
                summary="Initial version" if version == 1 else f"Baseline version {version}",
                size=len(new_content),
            )

        logger.debug(
            "Storing delta",
            extra={"document_id": document_id, "version": version, "delta_size": decision.delta_size},
        )
        return VersionRecord(
            document_id=document_id,
            version=version,
            timestamp=timestamp,
            kind=VersionKind.DELTA,
            delta=decision.payload,
            summary=self.codec.summarize(decision.diff_ops),
            size=decision.delta_size,
        )

    def reconstruct_content(self, chain: Sequence[VersionRecord], target_version: int) -> str:
        """Return the content of ``target_version``.

        Raises:
            MissingBaselineError: nothing to replay from.
            CorruptDeltaError: a delta in the path fails to replay.
        """
        return self.reconstructor.reconstruct(chain, target_version)

    def storage_stats(self, chain: Sequence[VersionRecord]) -> StorageStats:
        return self.stats_calculator.stats(chain)

    def version_metadata(self, chain: Sequence[VersionRecord]) -> VersionMetadata:
        return self.stats_calculator.metadata(chain)

    def optimize_version_history(self, chain: Sequence[VersionRecord]) -> List[VersionRecord]:
        """Retention hook. Records are immutable, so the chain comes back as is, ordered."""
        return sort_chain(chain)
