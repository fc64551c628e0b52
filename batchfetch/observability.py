"""
batchfetch.observability — Run metrics lifecycle and alert evaluation.

Threshold Rationale
-------------------
FAILURE_RATE_WARNING  (10 %)   — A healthy batch succeeds >95 %. 10 % points
    at a flaky host or a per-host limit the remote side dislikes.
FAILURE_RATE_CRITICAL (25 %)   — A quarter of the batch missing makes the
    result set materially incomplete.
HOST_DOWN_MIN_REQUESTS   (1)   — A host whose every request failed is
    reported as down, however few requests it had.
"""

import uuid
from datetime import datetime, timezone

from batchfetch.throttle import STATUS_CONNECTION_ERROR, STATUS_TRANSPORT_ERROR

FAILURE_RATE_WARNING = 10.0
FAILURE_RATE_CRITICAL = 25.0
HOST_DOWN_MIN_REQUESTS = 1


def start_download_run(requests_total: int, workers: int, conns_per_host: int) -> dict:
    """Begin a new download run.  Returns a metrics dict to populate."""
    return {
        "run_id": str(uuid.uuid4()),
        "run_start": datetime.now(timezone.utc),
        "run_end": None,
        "duration_seconds": None,
        "requests_total": requests_total,
        "workers": workers,
        "conns_per_host": conns_per_host,
        "fetch_success": 0,
        "fetch_failed": 0,
        "fetch_timeout": 0,
        "fetch_connection_error": 0,
        "hosts": {},
        "failure_rate_pct": None,
        "status": "running",
        "error_message": None,
    }


def record_outcome(metrics: dict, status: int, reason: str = "", host: str = None) -> None:
    """Count one finished request by its (pseudo) HTTP status, and per host when given."""
    ok = 200 <= status < 300
    if ok:
        metrics["fetch_success"] += 1
    elif status == STATUS_TRANSPORT_ERROR and reason.startswith("timeout"):
        metrics["fetch_timeout"] += 1
    elif status == STATUS_CONNECTION_ERROR:
        metrics["fetch_connection_error"] += 1
    else:
        metrics["fetch_failed"] += 1

    if host is not None:
        counts = metrics["hosts"].setdefault(host, {"requests": 0, "failed": 0, "last_reason": None})
        counts["requests"] += 1
        if not ok:
            counts["failed"] += 1
            counts["last_reason"] = reason


def finish_download_run(metrics: dict, error: Exception = None) -> dict:
    """Finalise metrics: compute duration, failure rate, mark completed or failed."""
    metrics["run_end"] = datetime.now(timezone.utc)
    elapsed = (metrics["run_end"] - metrics["run_start"]).total_seconds()
    metrics["duration_seconds"] = round(elapsed, 2)

    total_fetches = (
        metrics["fetch_success"]
        + metrics["fetch_failed"]
        + metrics["fetch_timeout"]
        + metrics["fetch_connection_error"]
    )
    if total_fetches > 0:
        failures = total_fetches - metrics["fetch_success"]
        metrics["failure_rate_pct"] = round(failures / total_fetches * 100, 2)
    else:
        metrics["failure_rate_pct"] = 0.0

    if error is not None:
        metrics["status"] = "failed"
        metrics["error_message"] = str(error)
    elif metrics["status"] == "running":
        metrics["status"] = "completed"

    return metrics


def _make_alert(metrics, severity, condition, message, metric_value=None, threshold=None, host=None):
    """Build a single alert dict for the run described by ``metrics``."""
    return {
        "alert_id": str(uuid.uuid4()),
        "run_id": metrics["run_id"],
        "created_at": datetime.now(timezone.utc),
        "severity": severity,
        "condition_name": condition,
        "host": host,
        "message": message,
        "metric_value": metric_value,
        "threshold": threshold,
    }


def _failure_rate_alert(metrics: dict):
    failure_rate = metrics.get("failure_rate_pct") or 0.0
    for severity, threshold in (("CRITICAL", FAILURE_RATE_CRITICAL), ("WARNING", FAILURE_RATE_WARNING)):
        if failure_rate >= threshold:
            return _make_alert(
                metrics, severity, f"failure_rate_{severity.lower()}",
                f"{failure_rate:.1f}% of {metrics['requests_total']} requests failed "
                f"({severity.lower()} threshold {threshold}%)",
                failure_rate, threshold,
            )
    return None


def _host_down_alerts(metrics: dict) -> list[dict]:
    alerts = []
    for host, counts in metrics.get("hosts", {}).items():
        if counts["requests"] >= HOST_DOWN_MIN_REQUESTS and counts["failed"] == counts["requests"]:
            alerts.append(_make_alert(
                metrics, "CRITICAL", "host_down",
                f"All {counts['requests']} request(s) to {host or '<no host>'} failed "
                f"(last: {counts['last_reason']})",
                float(counts["failed"]), float(counts["requests"]), host=host,
            ))
    return alerts


def evaluate_alerts(metrics: dict) -> list[dict]:
    """
    Evaluate alert conditions against a finished metrics dict:
      - overall failure rate above the warning or critical threshold
      - a host whose every request failed
      - a run that raised instead of returning results
    Returns zero or more alert dicts.
    """
    alerts: list[dict] = []

    rate_alert = _failure_rate_alert(metrics)
    if rate_alert is not None:
        alerts.append(rate_alert)

    alerts.extend(_host_down_alerts(metrics))

    if metrics["status"] == "failed":
        alerts.append(_make_alert(
            metrics, "CRITICAL", "run_failed",
            f"Download run failed: {metrics['error_message']}",
        ))

    return alerts
