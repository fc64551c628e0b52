"""
batchfetch.transport — Default fetch capability built on ``requests``.

One ``HttpTransport`` belongs to one run: its session, connection pools and
per-host slots are never shared with another run, so concurrent runs with
different per-host limits stay isolated.
"""

import threading
from contextlib import contextmanager
from typing import Mapping, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter

from batchfetch.errors import ConfigurationError
from batchfetch.response import failure_headers
from batchfetch.throttle import (
    DEFAULT_CONNS_PER_HOST,
    FETCH_HEADERS,
    MAX_CONTENT_SIZE,
    REQUEST_TIMEOUT,
    STATUS_BODY_ERROR,
    STATUS_CONNECTION_ERROR,
    STATUS_TRANSPORT_ERROR,
    STREAM_CHUNK_SIZE,
    TRANSPORT_ARG_KEYS,
)


def check_conns_per_host(conns_per_host) -> int:
    if isinstance(conns_per_host, bool) or not isinstance(conns_per_host, int) or conns_per_host < 1:
        raise ConfigurationError(f"conns_per_host must be 1 or more, got {conns_per_host!r}")
    return conns_per_host


class HttpTransport:
    """
    Fetch requests with a shared ``requests.Session``, allowing at most
    ``conns_per_host`` simultaneous requests to any single host.

    ``transport_args`` is passed through to every request:
    ``timeout``, ``verify``, ``cert``, ``proxies``, ``allow_redirects``,
    extra default ``headers`` and ``max_content_size`` (bytes).
    """

    def __init__(
        self,
        conns_per_host: int = DEFAULT_CONNS_PER_HOST,
        transport_args: Optional[Mapping] = None,
        session: Optional[requests.Session] = None,
    ):
        check_conns_per_host(conns_per_host)

        args = dict(transport_args or {})
        unknown = sorted(set(args) - TRANSPORT_ARG_KEYS)
        if unknown:
            raise ConfigurationError(f"Unknown transport_args: {', '.join(unknown)}")

        self.conns_per_host = conns_per_host
        self.timeout = args.get("timeout", REQUEST_TIMEOUT)
        self.max_content_size = args.get("max_content_size", MAX_CONTENT_SIZE)
        self._request_kwargs = {
            "timeout": self.timeout,
            "allow_redirects": args.get("allow_redirects", True),
        }
        for key in ("verify", "cert", "proxies"):
            if key in args:
                self._request_kwargs[key] = args[key]

        self.session = session or self._build_session()
        self.default_headers = dict(FETCH_HEADERS)
        self.default_headers.update(args.get("headers") or {})

        self._slots_lock = threading.Lock()
        self._host_slots = {}

    def _build_session(self) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(pool_connections=10, pool_maxsize=self.conns_per_host)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    @contextmanager
    def _host_slot(self, host: str):
        """Hold one of the host's ``conns_per_host`` slots for the duration of a request."""
        with self._slots_lock:
            slot = self._host_slots.get(host)
            if slot is None:
                slot = threading.BoundedSemaphore(self.conns_per_host)
                self._host_slots[host] = slot
        with slot:
            yield

    def fetch(self, request) -> Tuple[Optional[bytes], dict]:
        """
        Download one request.  Returns ``(body, headers)``; failures that
        produced no HTTP response return ``(None, headers)`` with a 59x
        ``Status`` and the error in ``Reason``.
        """
        with self._host_slot(request.host):
            return self._send(request)

    __call__ = fetch

    def _send(self, request) -> Tuple[Optional[bytes], dict]:
        try:
            with self.session.request(
                request.method,
                request.url,
                headers={**self.default_headers, **request.headers},
                data=request.body,
                stream=True,
                **self._request_kwargs,
            ) as resp:
                headers = {name.lower(): value for name, value in resp.headers.items()}
                headers.update({"Status": resp.status_code, "Reason": resp.reason or "", "URL": resp.url})

                try:
                    body, truncated = self._read_body(resp)
                except requests.exceptions.RequestException as e:
                    headers.update({"Status": STATUS_BODY_ERROR, "Reason": f"body_error: {e}"})
                    return None, headers

                if truncated:
                    headers["Truncated"] = 1
                return body, headers

        except requests.exceptions.Timeout as e:
            return None, failure_headers(STATUS_TRANSPORT_ERROR, f"timeout: {e}", request.url)
        except requests.exceptions.ConnectionError as e:
            return None, failure_headers(STATUS_CONNECTION_ERROR, f"connection_error: {e}", request.url)
        except requests.exceptions.RequestException as e:
            return None, failure_headers(STATUS_TRANSPORT_ERROR, str(e), request.url)

    def _read_body(self, resp) -> Tuple[bytes, bool]:
        chunks = []
        total_size = 0
        for chunk in resp.iter_content(chunk_size=STREAM_CHUNK_SIZE):
            if not chunk:
                continue
            total_size += len(chunk)
            if total_size > self.max_content_size:
                keep = len(chunk) - (total_size - self.max_content_size)
                chunks.append(chunk[:keep])
                return b"".join(chunks), True
            chunks.append(chunk)
        return b"".join(chunks), False

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False
