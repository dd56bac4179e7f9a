"""Baseline policy - decides whether a version is stored in full.

Rules, first match wins:
1. Version 1 is always a baseline (a chain must start with full content).
2. Every ``baseline_interval``-th version is a baseline, bounding replay to
   ``baseline_interval - 1`` deltas.
3. A version whose serialized delta would exceed ``max_delta_size`` is a
   baseline.
4. Everything else is a delta.

Rule 3 needs the delta itself, so ``evaluate()`` hands the computed delta
back to the caller instead of discarding it.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..exceptions import SizeMeasurementError, VersionChainError
from ..schemas.version import DeltaOp
from .delta_codec import DeltaCodec
from .diff_engine import DiffEngine, DiffOperation

logger = logging.getLogger(__name__)

DEFAULT_BASELINE_INTERVAL = 10
DEFAULT_MAX_DELTA_SIZE = 5000


class BaselineReason(str, Enum):
    """Why a version was (or was not) stored as a baseline."""
    FIRST_VERSION = "first_version"
    INTERVAL = "interval"
    DELTA_TOO_LARGE = "delta_too_large"
    DELTA = "delta"


@dataclass
class BaselineDecision:
    """Outcome of the policy, plus the delta measured under rule 3."""
    is_baseline: bool
    reason: BaselineReason
    diff_ops: List[DiffOperation] = field(default_factory=list)
    ops: List[DeltaOp] = field(default_factory=list)
    payload: Optional[str] = None

    @property
    def delta_size(self) -> Optional[int]:
        return len(self.payload) if self.payload is not None else None


class BaselinePolicy:
    """Applies the baseline rules for one engine configuration."""

    def __init__(
        self,
        diff_engine: DiffEngine,
        codec: DeltaCodec,
        baseline_interval: int = DEFAULT_BASELINE_INTERVAL,
        max_delta_size: int = DEFAULT_MAX_DELTA_SIZE,
    ):
        if baseline_interval < 1:
            raise ValueError("baseline_interval must be >= 1")
        if max_delta_size < 0:
            raise ValueError("max_delta_size must be >= 0")
        self.diff_engine = diff_engine
        self.codec = codec
        self.baseline_interval = baseline_interval
        self.max_delta_size = max_delta_size

    def should_baseline(self, version: int, new_content: str, previous_content: str) -> bool:
        """Return True when ``version`` must be stored as a full baseline."""
        return self.evaluate(version, new_content, previous_content).is_baseline

    def evaluate(self, version: int, new_content: str, previous_content: str) -> BaselineDecision:
        """Apply the rules and return the decision with any delta it computed.

        Raises:
            SizeMeasurementError: the speculative compression for rule 3 failed.
        """
        if version == 1:
            return BaselineDecision(True, BaselineReason.FIRST_VERSION)

        if version % self.baseline_interval == 0:
            return BaselineDecision(True, BaselineReason.INTERVAL)

        # Every delta spells out the whole old text plus the inserted text,
        # so its payload is never shorter than the longer of the two.
        if max(len(previous_content), len(new_content)) > self.max_delta_size:
            logger.debug(
                "Delta lower bound exceeds limit",
                extra={"version": version, "max_delta_size": self.max_delta_size},
            )
            return BaselineDecision(True, BaselineReason.DELTA_TOO_LARGE)

        try:
            diff_ops = self.diff_engine.diff(previous_content, new_content)
            ops = self.codec.compress(diff_ops)
            payload = self.codec.serialize(ops)
        except VersionChainError:
            raise
        except Exception as e:
            raise SizeMeasurementError(version, e) from e

        if len(payload) > self.max_delta_size:
            logger.debug(
                "Delta exceeds limit",
                extra={"version": version, "delta_size": len(payload), "max_delta_size": self.max_delta_size},
            )
            return BaselineDecision(
                True, BaselineReason.DELTA_TOO_LARGE, diff_ops=diff_ops, ops=ops, payload=payload
            )

        return BaselineDecision(False, BaselineReason.DELTA, diff_ops=diff_ops, ops=ops, payload=payload)
