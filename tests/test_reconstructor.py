"""Tests for replaying version chains."""

import pytest

from versionchain.exceptions import CorruptDeltaError, MissingBaselineError
from versionchain.services.delta_codec import DeltaCodec
from versionchain.services.reconstructor import Reconstructor, sort_chain
from tests.conftest import baseline, delta


def _reconstructor() -> Reconstructor:
    return Reconstructor(DeltaCodec())


class TestReconstruct:

    def test_baseline_only(self):
        chain = [baseline(1, "Hello")]
        assert _reconstructor().reconstruct(chain, 1) == "Hello"

    def test_replays_deltas_in_order(self):
        chain = [
            baseline(1, "Hello"),
            delta(2, '[{"t":"u","v":"Hello"},{"t":"a","v":" world"}]'),
            delta(3, '[{"t":"r","v":"Hello"},{"t":"a","v":"Goodbye"},{"t":"u","v":" world"}]'),
        ]
        r = _reconstructor()
        assert r.reconstruct(chain, 2) == "Hello world"
        assert r.reconstruct(chain, 3) == "Goodbye world"

    def test_unsorted_chain(self):
        chain = [
            delta(2, '[{"t":"u","v":"a"},{"t":"a","v":"b"}]'),
            baseline(1, "a"),
        ]
        assert _reconstructor().reconstruct(chain, 2) == "ab"

    def test_starts_from_latest_baseline(self):
        # A corrupt delta before the baseline is never replayed.
        chain = [
            baseline(1, "old"),
            delta(2, '[{"t":"u","v":"WRONG"}]'),
            baseline(3, "fresh"),
            delta(4, '[{"t":"u","v":"fresh"},{"t":"a","v":"!"}]'),
        ]
        assert _reconstructor().reconstruct(chain, 4) == "fresh!"

    def test_later_records_are_ignored(self):
        chain = [
            baseline(1, "one"),
            delta(2, '[{"t":"x","v":"bad"}]'),
        ]
        assert _reconstructor().reconstruct(chain, 1) == "one"


class TestErrors:

    def test_no_record_at_or_before_target(self):
        chain = [baseline(7, "seven"), delta(8, "[]")]
        with pytest.raises(MissingBaselineError) as exc_info:
            _reconstructor().reconstruct(chain, 5)
        assert exc_info.value.details["target_version"] == 5

    def test_empty_chain(self):
        with pytest.raises(MissingBaselineError):
            _reconstructor().reconstruct([], 1)

    def test_chain_starting_with_delta(self):
        chain = [delta(1, '[{"t":"a","v":"x"}]'), delta(2, "[]")]
        with pytest.raises(MissingBaselineError):
            _reconstructor().reconstruct(chain, 2)

    def test_target_beyond_chain(self):
        with pytest.raises(MissingBaselineError):
            _reconstructor().reconstruct([baseline(1, "a")], 3)

    def test_gap_at_target(self):
        chain = [baseline(1, "a"), baseline(3, "c")]
        with pytest.raises(MissingBaselineError):
            _reconstructor().reconstruct(chain, 2)

    def test_corrupt_delta_reports_version(self):
        chain = [baseline(1, "Hello"), delta(2, '[{"t":"u","v":"Jello"}]')]
        with pytest.raises(CorruptDeltaError) as exc_info:
            _reconstructor().reconstruct(chain, 2)
        assert exc_info.value.details["version"] == 2
        assert exc_info.value.details["document_id"] == "doc-1"

    def test_duplicate_versions_are_corrupt(self):
        chain = [baseline(1, "a"), baseline(1, "b")]
        with pytest.raises(CorruptDeltaError):
            _reconstructor().reconstruct(chain, 1)


class TestReconstructAll:

    def test_every_version(self):
        chain = [
            baseline(1, "a"),
            delta(2, '[{"t":"u","v":"a"},{"t":"a","v":"b"}]'),
            baseline(3, "c"),
        ]
        assert _reconstructor().reconstruct_all(chain) == {1: "a", 2: "ab", 3: "c"}

    def test_leading_delta(self):
        with pytest.raises(MissingBaselineError):
            _reconstructor().reconstruct_all([delta(1, "[]")])


class TestSortChain:

    def test_orders_by_version(self):
        chain = [baseline(3, "c"), baseline(1, "a"), baseline(2, "b")]
        assert [r.version for r in sort_chain(chain)] == [1, 2, 3]

    def test_returns_copy(self):
        chain = [baseline(2, "b"), baseline(1, "a")]
        sort_chain(chain)
        assert [r.version for r in chain] == [2, 1]
