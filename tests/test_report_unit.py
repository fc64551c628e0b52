"""
Unit tests — pandas summaries of download results (batchfetch.report).
"""

import pandas as pd
import pytest

from batchfetch.hashing import compute_hash
from batchfetch.report import HOST_SUMMARY_COLUMNS, RESPONSE_COLUMNS, host_summary, responses_to_frame
from batchfetch.request import GET
from batchfetch.response import Response


def _ok(url, body=b"ok"):
    return Response(body, {"Status": 200, "Reason": "OK", "URL": url}, GET(url))


def _failed(url, status=595):
    return Response(None, {"Status": status, "Reason": "connection_error: refused"}, GET(url))


class TestResponsesToFrame:
    """responses_to_frame — one row per response."""

    def test_columns_and_rows(self):
        df = responses_to_frame([_ok("https://a.example/1"), _failed("https://b.example/1")])
        assert list(df.columns) == RESPONSE_COLUMNS
        assert len(df) == 2

    def test_success_row(self):
        df = responses_to_frame([_ok("https://a.example/1", b"hello")])
        row = df.iloc[0]
        assert row["host"] == "a.example"
        assert row["status"] == 200
        assert bool(row["success"]) is True
        assert row["size_bytes"] == 5
        assert row["content_hash"] == compute_hash(b"hello")

    def test_failed_row(self):
        row = responses_to_frame([_failed("https://b.example/x")]).iloc[0]
        assert row["status"] == 595
        assert bool(row["success"]) is False
        assert row["size_bytes"] == 0
        assert pd.isna(row["content_hash"])
        assert row["final_url"] == "https://b.example/x"

    def test_empty(self):
        df = responses_to_frame([])
        assert df.empty
        assert list(df.columns) == RESPONSE_COLUMNS


class TestHostSummary:
    """host_summary — per-host aggregation."""

    def test_aggregates_per_host(self):
        df = responses_to_frame([
            _ok("https://a.example/1", b"12"),
            _ok("https://a.example/2", b"345"),
            _failed("https://a.example/3"),
            _ok("https://b.example/1", b"6"),
        ])
        summary = host_summary(df)

        assert list(summary.columns) == HOST_SUMMARY_COLUMNS
        assert list(summary["host"]) == ["a.example", "b.example"]
        a = summary.iloc[0]
        assert a["requests"] == 3
        assert a["succeeded"] == 2
        assert a["failed"] == 1
        assert a["failure_rate_pct"] == pytest.approx(33.33)
        assert a["bytes"] == 5

    def test_ties_sorted_by_host(self):
        df = responses_to_frame([_ok("https://z.example/1"), _ok("https://m.example/1")])
        assert list(host_summary(df)["host"]) == ["m.example", "z.example"]

    def test_empty_frame(self):
        summary = host_summary(pd.DataFrame(columns=RESPONSE_COLUMNS))
        assert summary.empty
        assert list(summary.columns) == HOST_SUMMARY_COLUMNS
