"""Delta codec - deep module for the persisted form of a delta.

Owns everything that touches a delta payload: compressing raw diff
operations, the JSON wire format, replaying a delta against its base
content, and the human-readable change summary.

Wire format: ``[{"t":"u","v":"Hello"},{"t":"a","v":" world"}]``, tags
``a`` (added), ``r`` (removed), ``u`` (unchanged), in operation order.
Unchanged spans are kept so replay can verify and copy base content.
"""

import logging
from typing import List, Sequence

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from ..exceptions import CorruptDeltaError
from ..schemas.version import ChangeKind, DeltaOp
from .diff_engine import DiffOperation

logger = logging.getLogger(__name__)

_OPS_ADAPTER = TypeAdapter(List[DeltaOp])


class DeltaCodec:
    """Compress, serialize, replay and summarize deltas."""

    def compress(self, ops: Sequence[DiffOperation]) -> List[DeltaOp]:
        """Map raw diff operations to their compact form, keeping every kind."""
        return [DeltaOp(kind=op.kind, value=op.value) for op in ops]

    def serialize(self, ops: Sequence[DeltaOp]) -> str:
        """Serialize compressed ops to the compact JSON wire format."""
        return _OPS_ADAPTER.dump_json(list(ops), by_alias=True).decode("utf-8")

    def deserialize(self, payload: str) -> List[DeltaOp]:
        """Parse a wire payload. Fails closed on anything but a valid op list.

        Raises:
            CorruptDeltaError: malformed JSON, wrong shape, or unknown tag.
        """
        try:
            return _OPS_ADAPTER.validate_json(payload)
        except PydanticValidationError as e:
            raise CorruptDeltaError(
                "Delta payload does not decode to an operation list",
                errors=e.error_count(),
            ) from e

    def apply(self, base: str, ops: Sequence[DeltaOp]) -> str:
        """Replay ``ops`` against ``base`` and return the resulting content.

        A read cursor walks ``base``: unchanged spans are verified and copied,
        removed spans are verified and skipped, added spans are appended.
        The cursor must finish exactly at the end of ``base``.

        Raises:
            CorruptDeltaError: a span does not match the base content at the
                cursor, or the ops do not consume the whole base.
        """
        cursor = 0
        parts: List[str] = []

        for index, op in enumerate(ops):
            if op.kind == ChangeKind.ADDED:
                parts.append(op.value)
                continue

            end = cursor + len(op.value)
            if base[cursor:end] != op.value:
                raise CorruptDeltaError(
                    f"{op.kind.name.lower()} span does not match base content",
                    op_index=index,
                    offset=cursor,
                )
            if op.kind == ChangeKind.UNCHANGED:
                parts.append(op.value)
            cursor = end

        if cursor != len(base):
            raise CorruptDeltaError(
                "Delta does not consume the whole base content",
                offset=cursor,
                base_length=len(base),
            )

        return "".join(parts)

    def summarize(self, ops: Sequence[DiffOperation]) -> str:
        """Describe a change as word counts, falling back to character counts."""
        added_chars = removed_chars = added_words = removed_words = 0

        for op in ops:
            if op.kind == ChangeKind.ADDED:
                added_chars += len(op.value)
                added_words += len(op.value.split())
            elif op.kind == ChangeKind.REMOVED:
                removed_chars += len(op.value)
                removed_words += len(op.value.split())

        parts = []
        if added_words > 0:
            parts.append(f"+{added_words} words")
        if removed_words > 0:
            parts.append(f"-{removed_words} words")
        if added_chars > 0 and added_words == 0:
            parts.append(f"+{added_chars} chars")
        if removed_chars > 0 and removed_words == 0:
            parts.append(f"-{removed_chars} chars")

        return ", ".join(parts) if parts else "Minor changes"
