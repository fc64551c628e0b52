"""
batchfetch — Download many HTTP requests at once, politely.

Re-exports every public symbol so that callers can use
``from batchfetch import download, GET`` without knowing the module layout.
"""

from batchfetch.request import (
    Request,
    make_request,
    GET,
    HEAD,
    POST,
    PUT,
    DELETE,
)

from batchfetch.normalize import host_key

from batchfetch.hashing import compute_hash

from batchfetch.throttle import (
    DEFAULT_WORKERS,
    DEFAULT_CONNS_PER_HOST,
    REQUEST_TIMEOUT,
    MAX_CONTENT_SIZE,
    STATUS_CONNECTION_ERROR,
    STATUS_BODY_ERROR,
    STATUS_TRANSPORT_ERROR,
    FETCH_HEADERS,
)

from batchfetch.errors import (
    BatchFetchError,
    ConfigurationError,
    SequencingError,
)

from batchfetch.interleave import bucket_by_host, interleave_by_host

from batchfetch.response import Response, default_build_response, status_of

from batchfetch.events import (
    WORKER_START,
    WORKER_REQUEST_ADD,
    WORKER_REQUEST_END,
    WORKER_END,
    EVENT_KINDS,
    default_logger,
)

from batchfetch.collector import ResultCollector

from batchfetch.sequencer import sequence_results

from batchfetch.pool import WorkQueue, Worker, effective_worker_count, run_pool

from batchfetch.transport import HttpTransport

from batchfetch.downloader import Downloader, download

from batchfetch.observability import (
    FAILURE_RATE_WARNING,
    FAILURE_RATE_CRITICAL,
    start_download_run,
    record_outcome,
    finish_download_run,
    evaluate_alerts,
)

from batchfetch.report import responses_to_frame, host_summary

__version__ = "1.0.0"
