"""
batchfetch.report — Tabular summaries of download results via pandas.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from batchfetch.hashing import compute_hash

RESPONSE_COLUMNS = [
    "method",
    "url",
    "final_url",
    "host",
    "status",
    "reason",
    "success",
    "truncated",
    "size_bytes",
    "content_hash",
]

HOST_SUMMARY_COLUMNS = ["host", "requests", "succeeded", "failed", "failure_rate_pct", "bytes"]


def responses_to_frame(responses: Iterable) -> pd.DataFrame:
    """
    One row per ``Response``, in the order given.  Works on the default
    result records only; custom ``build_response`` output is not inspected.
    """
    rows = []
    for resp in responses:
        rows.append({
            "method": resp.request.method,
            "url": resp.request.url,
            "final_url": resp.url,
            "host": resp.request.host,
            "status": resp.status,
            "reason": resp.reason,
            "success": resp.success,
            "truncated": resp.truncated,
            "size_bytes": len(resp.body) if resp.body is not None else 0,
            "content_hash": compute_hash(resp.body),
        })
    return pd.DataFrame(rows, columns=RESPONSE_COLUMNS)


def host_summary(frame: pd.DataFrame) -> pd.DataFrame:
    """Aggregate a ``responses_to_frame`` result per host, busiest host first."""
    if frame.empty:
        return pd.DataFrame(columns=HOST_SUMMARY_COLUMNS)

    grouped = frame.groupby("host", sort=False)
    summary = pd.DataFrame({
        "requests": grouped.size(),
        "succeeded": grouped["success"].sum().astype(int),
        "bytes": grouped["size_bytes"].sum().astype(int),
    }).rename_axis("host").reset_index()
    summary["failed"] = summary["requests"] - summary["succeeded"]
    summary["failure_rate_pct"] = (summary["failed"] / summary["requests"] * 100).round(2)

    summary = summary.sort_values(["requests", "host"], ascending=[False, True], kind="stable")
    return summary[HOST_SUMMARY_COLUMNS].reset_index(drop=True)
