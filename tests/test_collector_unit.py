"""
Unit tests — Completion collector and result sequencing.
"""

import threading

import pytest

from batchfetch.collector import ResultCollector
from batchfetch.errors import SequencingError
from batchfetch.sequencer import sequence_results


class TestResultCollector:
    """batchfetch.collector.ResultCollector — concurrent append."""

    def test_records_in_completion_order(self):
        collector = ResultCollector()
        collector.record(2, "c")
        collector.record(0, "a")
        assert collector.records() == [(2, "c"), (0, "a")]
        assert collector.results() == ["c", "a"]
        assert len(collector) == 2

    def test_duplicate_index_rejected(self):
        collector = ResultCollector()
        collector.record(0, "a")
        with pytest.raises(SequencingError):
            collector.record(0, "again")

    def test_concurrent_writers(self):
        collector = ResultCollector()

        def write(start):
            for i in range(start, start + 250):
                collector.record(i, i * 2)

        threads = [threading.Thread(target=write, args=(n * 250,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(collector) == 2000
        assert sorted(i for i, _ in collector.records()) == list(range(2000))

    def test_snapshot_is_a_copy(self):
        collector = ResultCollector()
        collector.record(0, "a")
        snapshot = collector.records()
        collector.record(1, "b")
        assert snapshot == [(0, "a")]


class TestSequenceResults:
    """batchfetch.sequencer.sequence_results — input-order restoration."""

    def test_sorted_by_input_index(self):
        records = [(2, "c"), (0, "a"), (1, "b")]
        assert sequence_results(records, 3) == ["a", "b", "c"]

    def test_disabled_keeps_completion_order(self):
        records = [(2, "c"), (0, "a"), (1, "b")]
        assert sequence_results(records, 3, enabled=False) == ["c", "a", "b"]

    def test_empty(self):
        assert sequence_results([], 0) == []

    def test_equal_results_not_confused(self):
        first, second = {"body": "same"}, {"body": "same"}
        out = sequence_results([(1, second), (0, first)], 2)
        assert out[0] is first and out[1] is second

    def test_none_results_are_valid(self):
        assert sequence_results([(1, None), (0, None)], 2) == [None, None]

    def test_unknown_index_raises(self):
        with pytest.raises(SequencingError):
            sequence_results([(0, "a"), (5, "x")], 2)

    def test_negative_index_raises(self):
        with pytest.raises(SequencingError):
            sequence_results([(-1, "x")], 1)

    def test_duplicate_index_raises(self):
        with pytest.raises(SequencingError):
            sequence_results([(0, "a"), (0, "b")], 2)

    def test_missing_result_raises(self):
        with pytest.raises(SequencingError, match="first missing: #1"):
            sequence_results([(0, "a")], 2)
