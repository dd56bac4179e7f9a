"""Tests for storage statistics."""

import pytest

from versionchain.services.stats_calculator import StatsCalculator
from tests.conftest import _T0, baseline, delta


def _chain():
    return [
        baseline(1, "Hello"),
        delta(2, "[]", size=20),
        delta(3, "[]", size=30),
        baseline(4, "abc"),
    ]


class TestStats:

    def test_empty_chain_is_all_zero(self):
        stats = StatsCalculator().stats([])
        assert stats.total_versions == 0
        assert stats.baselines == 0
        assert stats.deltas == 0
        assert stats.total_size == 0
        assert stats.average_delta_size == 0
        assert stats.compression_ratio == 0

    def test_counts_and_sizes(self):
        stats = StatsCalculator().stats(_chain())
        assert stats.total_versions == 4
        assert stats.baselines == 2
        assert stats.deltas == 2
        assert stats.total_size == 58
        assert stats.average_delta_size == pytest.approx(25.0)

    def test_ratio_uses_first_baseline(self):
        stats = StatsCalculator().stats(_chain())
        assert stats.compression_ratio == pytest.approx(58 / (4 * 5))

    def test_no_baseline_gives_zero_ratio(self):
        stats = StatsCalculator().stats([delta(2, "[]", size=7)])
        assert stats.compression_ratio == 0

    def test_empty_first_baseline_gives_zero_ratio(self):
        stats = StatsCalculator().stats([baseline(1, ""), delta(2, "[]", size=4)])
        assert stats.compression_ratio == 0


class TestMetadata:

    def test_empty_chain(self):
        meta = StatsCalculator().metadata([])
        assert meta.current_version == 0
        assert meta.last_modified is None

    def test_summary(self):
        meta = StatsCalculator().metadata(_chain())
        assert meta.total_versions == 4
        assert meta.current_version == 4
        assert meta.total_size == 58
        assert meta.last_modified == _T0


class TestAggregate:

    def test_empty(self):
        result = StatsCalculator().aggregate({})
        assert result.total_documents == 0
        assert result.most_active_document is None

    def test_sums_over_documents(self):
        chains = {
            "doc-1": _chain(),
            "doc-2": [baseline(1, "xy", document_id="doc-2")],
        }
        result = StatsCalculator().aggregate(chains)
        assert result.total_documents == 2
        assert result.total_versions == 5
        assert result.baselines == 3
        assert result.deltas == 2
        assert result.total_size == 60
        assert result.average_delta_size == pytest.approx(25.0)
        assert result.average_compression_ratio == pytest.approx((2.9 + 1.0) / 2)
        assert result.most_active_document == "doc-1"
