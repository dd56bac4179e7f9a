"""Version chain engine and the services built on it."""

from .diff_engine import DiffEngine, DiffOperation
from .delta_codec import DeltaCodec
from .baseline_policy import BaselinePolicy, BaselineDecision, BaselineReason
from .reconstructor import Reconstructor
from .stats_calculator import StatsCalculator
from .version_engine import VersionEngine
from .version_service import VersionService

__all__ = [
    "DiffEngine",
    "DiffOperation",
    "DeltaCodec",
    "BaselinePolicy",
    "BaselineDecision",
    "BaselineReason",
    "Reconstructor",
    "StatsCalculator",
    "VersionEngine",
    "VersionService",
]
