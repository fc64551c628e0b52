"""
batchfetch.downloader — Run a batch of HTTP requests with bounded concurrency.

    from batchfetch import GET, download
    responses = download([GET("https://example.com/") for _ in range(15)])

Requests are interleaved by host, handed to ``workers`` threads through a
shared queue, and fetched with at most ``conns_per_host`` requests in flight
against any one host.  The call blocks until every request has a result.
"""

import threading
from collections.abc import Sequence
from typing import Callable, List, Mapping, Optional

from batchfetch.collector import ResultCollector
from batchfetch.errors import ConfigurationError
from batchfetch.events import default_logger, make_event
from batchfetch.interleave import interleave_by_host
from batchfetch.observability import (
    finish_download_run,
    record_outcome,
    start_download_run,
)
from batchfetch.pool import WorkQueue, effective_worker_count, run_pool
from batchfetch.response import default_build_response, status_of
from batchfetch.sequencer import sequence_results
from batchfetch.throttle import DEFAULT_CONNS_PER_HOST, DEFAULT_WORKERS
from batchfetch.transport import HttpTransport, check_conns_per_host


class Downloader:
    """
    Options
    -------
    requests : sequence of Request
        Everything to download.  An empty sequence yields no results.
    workers : int
        Global cap on simultaneous requests (default 10, 0 = one per request).
    conns_per_host : int
        Cap on simultaneous requests to a single host (default 4).
    transport_args : mapping
        Passed through to ``HttpTransport`` (timeout, verify, proxies, ...).
    debug : bool
        Send worker events to ``logger``; logging is a no-op otherwise.
    logger : callable
        ``logger(downloader, event)``; defaults to printing the message.
    build_response : callable
        ``build_response(body, headers, request)``; defaults to ``Response``.
    sort_results : bool
        Return results in input order (default) instead of completion order.
    transport : callable
        Replaces the default transport: ``transport(request) -> (body, headers)``.
        ``conns_per_host`` and ``transport_args`` are then its own business.
    """

    def __init__(
        self,
        requests: Sequence,
        workers: int = DEFAULT_WORKERS,
        conns_per_host: int = DEFAULT_CONNS_PER_HOST,
        transport_args: Optional[Mapping] = None,
        debug: bool = False,
        logger: Optional[Callable] = None,
        build_response: Optional[Callable] = None,
        sort_results: bool = True,
        transport: Optional[Callable] = None,
    ):
        if isinstance(requests, (str, bytes)) or not isinstance(requests, Sequence):
            raise ConfigurationError("requests must be a sequence of requests")
        for name, hook in (("logger", logger), ("build_response", build_response), ("transport", transport)):
            if hook is not None and not callable(hook):
                raise ConfigurationError(f"{name} must be callable")
        effective_worker_count(workers, len(requests))
        check_conns_per_host(conns_per_host)

        self.requests = requests
        self.workers = workers
        self.conns_per_host = conns_per_host
        self.transport_args = dict(transport_args or {})
        self.debug = bool(debug)
        self.logger = logger or default_logger
        self.build_response = build_response or default_build_response
        self.sort_results = bool(sort_results)
        self.transport = transport
        self.metrics: Optional[dict] = None

    def run(self) -> List:
        """Download every request and return one result per request."""
        requests = list(self.requests)
        worker_count = effective_worker_count(self.workers, len(requests))
        transport = self.transport or HttpTransport(self.conns_per_host, self.transport_args)

        metrics = start_download_run(len(requests), worker_count, self.conns_per_host)
        self.metrics = metrics
        metrics_lock = threading.Lock()
        collector = ResultCollector()

        def on_result(index, request, body, headers):
            collector.record(index, self.build_response(body, headers, request))
            with metrics_lock:
                record_outcome(metrics, status_of(headers), str(headers.get("Reason", "")), request.host)

        queue = WorkQueue(interleave_by_host(enumerate(requests), key=_indexed_host))
        try:
            run_pool(queue, worker_count, transport, on_result, self._log)
            results = sequence_results(collector.records(), len(requests), self.sort_results)
        except Exception as e:
            finish_download_run(metrics, e)
            raise
        finally:
            if self.transport is None:
                transport.close()

        finish_download_run(metrics)
        return results

    def _log(self, kind, message, worker_id=None, request=None):
        if not self.debug:
            return
        self.logger(self, make_event(kind, message, worker_id, request))


def _indexed_host(pair) -> str:
    return pair[1].host


def download(requests: Sequence, **options) -> List:
    """Build a ``Downloader`` with the given options, run it and return its results."""
    return Downloader(requests, **options).run()
