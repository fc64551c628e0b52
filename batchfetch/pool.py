"""
batchfetch.pool — Shared work queue and the worker threads draining it.

Each worker owns one request at a time: claim, fetch, record, repeat.  The
fetch call is the only place a worker blocks, so up to N downloads are in
flight at once.  Workers never look at hosts; the per-host cap lives in the
fetch capability and the interleaved queue order keeps it from stalling the
pool.
"""

import threading
from collections import deque
from typing import Callable, Iterable, List, Optional, Tuple

from batchfetch.errors import ConfigurationError
from batchfetch.events import (
    WORKER_END,
    WORKER_REQUEST_ADD,
    WORKER_REQUEST_END,
    WORKER_START,
)
from batchfetch.response import failure_headers
from batchfetch.throttle import STATUS_TRANSPORT_ERROR

IDLE = "idle"
PROCESSING = "processing"
TERMINATED = "terminated"


class WorkQueue:
    """Ordered ``(index, request)`` pairs; ``claim`` pops the head atomically."""

    def __init__(self, items: Iterable[Tuple[int, object]] = ()):
        self._items = deque(items)
        self._lock = threading.Lock()

    def claim(self) -> Optional[Tuple[int, object]]:
        """Take the next item, or ``None`` once the queue is exhausted."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


def effective_worker_count(workers: int, request_count: int) -> int:
    """
    Number of workers to start:
      - 0 means one worker per request
      - never more workers than requests
      - negative counts are a configuration error
    """
    if isinstance(workers, bool) or not isinstance(workers, int):
        raise ConfigurationError(f"workers must be an integer, got {workers!r}")
    if workers < 0:
        raise ConfigurationError(f"workers should be 0 or more, got {workers}")

    if workers == 0 or workers > request_count:
        return request_count
    return workers


class Worker:
    """One worker thread pulling from a shared ``WorkQueue``."""

    def __init__(self, worker_id: int, queue: WorkQueue, fetch, on_result, log=None):
        self.worker_id = worker_id
        self.queue = queue
        self.fetch = fetch
        self.on_result = on_result
        self.log = log or _no_log
        self.state = IDLE
        self.processed = 0
        self.error: Optional[BaseException] = None
        self._thread = threading.Thread(
            target=self._run,
            name=f"batchfetch-worker-{worker_id}",
            daemon=True,
        )

    def start(self) -> None:
        self._thread.start()

    def join(self) -> None:
        self._thread.join()

    def _run(self) -> None:
        try:
            self.log(WORKER_START, f"{self.worker_id} started", self.worker_id)
            while True:
                claimed = self.queue.claim()
                if claimed is None:
                    break
                self._process(*claimed)
        except BaseException as exc:
            # Re-raised by run_pool once every worker has stopped
            self.error = exc
        finally:
            self.state = TERMINATED
            self._log_end()

    def _log_end(self) -> None:
        try:
            self.log(WORKER_END, f"{self.worker_id} ended", self.worker_id)
        except BaseException as exc:
            if self.error is None:
                self.error = exc

    def _process(self, index: int, request) -> None:
        self.state = PROCESSING
        self.log(
            WORKER_REQUEST_ADD,
            f"{self.worker_id} accepted new request for {request.host}",
            self.worker_id,
            request,
        )

        body, headers = _fetch_outcome(self.fetch, request)
        self.on_result(index, request, body, headers)
        self.processed += 1

        self.log(
            WORKER_REQUEST_END,
            f"{self.worker_id} completed a request for {request.host}",
            self.worker_id,
            request,
        )
        self.state = IDLE


def _fetch_outcome(fetch, request):
    """Call ``fetch``; an exception becomes a failed outcome instead of ending the worker."""
    try:
        return fetch(request)
    except Exception as exc:
        reason = f"{type(exc).__name__}: {exc}"
        return None, failure_headers(STATUS_TRANSPORT_ERROR, reason, request.url)


def _no_log(kind, message, worker_id=None, request=None):
    return None


def run_pool(
    queue: WorkQueue,
    worker_count: int,
    fetch: Callable,
    on_result: Callable,
    log: Optional[Callable] = None,
) -> List[Worker]:
    """
    Start ``worker_count`` workers against ``queue`` and block until every
    one of them has drained it and terminated.  Returns the finished workers.

    ``fetch(request)`` returns ``(body, headers)``;
    ``on_result(index, request, body, headers)`` is called once per request
    from the worker that completed it.
    """
    if worker_count < 0:
        raise ConfigurationError(f"worker_count should be 0 or more, got {worker_count}")

    workers = [
        Worker(worker_id, queue, fetch, on_result, log)
        for worker_id in range(1, worker_count + 1)
    ]
    started = []
    try:
        for worker in workers:
            worker.start()
            started.append(worker)
    finally:
        for worker in started:
            worker.join()

    for worker in workers:
        if worker.error is not None:
            raise worker.error
    return workers
