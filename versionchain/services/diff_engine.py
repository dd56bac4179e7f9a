"""Character-level diff between two content states."""

import logging
from dataclasses import dataclass
from typing import List

from diff_match_patch import diff_match_patch

from ..schemas.version import ChangeKind

logger = logging.getLogger(__name__)

_KIND_BY_DMP_OP = {
    diff_match_patch.DIFF_DELETE: ChangeKind.REMOVED,
    diff_match_patch.DIFF_INSERT: ChangeKind.ADDED,
    diff_match_patch.DIFF_EQUAL: ChangeKind.UNCHANGED,
}


@dataclass(frozen=True)
class DiffOperation:
    """One raw edit operation. Engine-internal; never persisted."""
    kind: ChangeKind
    value: str


class DiffEngine:
    """Computes an ordered edit script that turns ``old`` into ``new``.

    Common prefix and suffix are matched first, and within one edit region
    removed text precedes added text. With ``timeout`` at 0 the search is
    unbounded and the script is fully determined by the two inputs.
    """

    def __init__(self, timeout: float = 0.0):
        self._dmp = diff_match_patch()
        self._dmp.Diff_Timeout = timeout

    def diff(self, old: str, new: str) -> List[DiffOperation]:
        """Diff two strings character by character."""
        # checklines=False: line mode would change the script for long texts.
        raw = self._dmp.diff_main(old, new, False)
        ops = [DiffOperation(_KIND_BY_DMP_OP[op], text) for op, text in raw if text]
        logger.debug("Computed diff", extra={"ops": len(ops), "old_len": len(old), "new_len": len(new)})
        return ops
