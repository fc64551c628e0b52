"""
batchfetch.throttle — Concurrency limits and transport defaults.
"""

DEFAULT_WORKERS = 10                      # 0 = one worker per request
DEFAULT_CONNS_PER_HOST = 4
REQUEST_TIMEOUT = 30
MAX_CONTENT_SIZE = 10 * 1024 * 1024       # 10 MB
STREAM_CHUNK_SIZE = 64 * 1024

# Pseudo status codes for requests that never produced an HTTP response
STATUS_CONNECTION_ERROR = 595
STATUS_BODY_ERROR = 597
STATUS_TRANSPORT_ERROR = 599

FETCH_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; BatchFetch/1.0)",
    "Accept": "*/*",
}

# transport_args keys understood by HttpTransport; anything else is rejected
TRANSPORT_ARG_KEYS = frozenset({
    "timeout",
    "verify",
    "cert",
    "proxies",
    "allow_redirects",
    "headers",
    "max_content_size",
})
