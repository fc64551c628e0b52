"""
batchfetch.events — Debug events emitted while a run progresses.

The logger hook is called as ``logger(downloader, event)``.  ``event`` is a
dict with ``kind`` and ``message``; worker events also carry ``worker_id``
and request events carry ``request``.
"""

WORKER_START = "WorkerStart"
WORKER_REQUEST_ADD = "WorkerRequestAdd"
WORKER_REQUEST_END = "WorkerRequestEnd"
WORKER_END = "WorkerEnd"

EVENT_KINDS = (WORKER_START, WORKER_REQUEST_ADD, WORKER_REQUEST_END, WORKER_END)


def make_event(kind: str, message: str, worker_id=None, request=None) -> dict:
    """Build a single event dict."""
    event = {"kind": kind, "message": message}
    if worker_id is not None:
        event["worker_id"] = worker_id
    if request is not None:
        event["request"] = request
    return event


def default_logger(downloader, event: dict) -> None:
    """Print the event message to standard output."""
    print(event["message"])
