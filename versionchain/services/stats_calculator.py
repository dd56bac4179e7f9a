"""Storage statistics over version chains.

The compression ratio is an estimate: stored size divided by what the chain
would take if every version were a copy of its first baseline.
"""

from typing import Mapping, Optional, Sequence

from ..schemas.version import CollectionStats, StorageStats, VersionMetadata, VersionRecord


def _first_baseline_size(chain: Sequence[VersionRecord]) -> int:
    baselines = [record for record in chain if record.is_baseline]
    if not baselines:
        return 0
    return min(baselines, key=lambda record: record.version).size


def _compression_ratio(total_size: int, total_versions: int, baseline_size: int) -> float:
    estimated_full_size = total_versions * baseline_size
    if estimated_full_size <= 0:
        return 0.0
    return total_size / estimated_full_size


class StatsCalculator:
    """Aggregates size, count and compression metrics."""

    def stats(self, chain: Sequence[VersionRecord]) -> StorageStats:
        """Compute storage stats for one chain."""
        deltas = [record for record in chain if not record.is_baseline]
        total_size = sum(record.size for record in chain)
        delta_size = sum(record.size for record in deltas)

        return StorageStats(
            total_versions=len(chain),
            baselines=len(chain) - len(deltas),
            deltas=len(deltas),
            total_size=total_size,
            average_delta_size=delta_size / len(deltas) if deltas else 0.0,
            compression_ratio=_compression_ratio(total_size, len(chain), _first_baseline_size(chain)),
        )

    def metadata(self, chain: Sequence[VersionRecord]) -> VersionMetadata:
        """Summarize a chain: latest version, total size, last modification."""
        if not chain:
            return VersionMetadata()

        total_size = sum(record.size for record in chain)
        return VersionMetadata(
            total_versions=len(chain),
            current_version=max(record.version for record in chain),
            total_size=total_size,
            compression_ratio=_compression_ratio(total_size, len(chain), _first_baseline_size(chain)),
            last_modified=max(record.timestamp for record in chain),
        )

    def aggregate(self, chains: Mapping[str, Sequence[VersionRecord]]) -> CollectionStats:
        """Sum per-document stats; the compression ratio is averaged per document."""
        if not chains:
            return CollectionStats()

        result = CollectionStats(total_documents=len(chains))
        ratio_sum = 0.0
        delta_size = 0
        most_active: Optional[str] = None
        most_versions = 0

        for document_id, chain in chains.items():
            stats = self.stats(chain)
            result.total_versions += stats.total_versions
            result.baselines += stats.baselines
            result.deltas += stats.deltas
            result.total_size += stats.total_size
            delta_size += stats.total_size - sum(r.size for r in chain if r.is_baseline)
            ratio_sum += stats.compression_ratio

            if stats.total_versions > most_versions:
                most_versions = stats.total_versions
                most_active = document_id

        result.average_delta_size = delta_size / result.deltas if result.deltas else 0.0
        result.average_compression_ratio = ratio_sum / len(chains)
        result.most_active_document = most_active
        return result
