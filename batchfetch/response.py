"""
batchfetch.response — Result records and the default response builder.
"""

from typing import Any, Mapping, Optional

from batchfetch.throttle import STATUS_TRANSPORT_ERROR


class Response:
    """The body, headers and originating request of one finished download."""

    def __init__(self, body: Optional[bytes], headers: Mapping[str, Any], request):
        self.body = body
        self.headers = dict(headers or {})
        self.request = request

    @property
    def status(self) -> int:
        """HTTP status, or a 59x pseudo status when no response arrived."""
        return status_of(self.headers)

    @property
    def reason(self) -> str:
        return str(self.headers.get("Reason", ""))

    @property
    def url(self) -> str:
        """Final URL after redirects, falling back to the requested one."""
        return self.headers.get("URL") or self.request.url

    @property
    def success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def failed(self) -> bool:
        return not self.success

    @property
    def truncated(self) -> bool:
        """
        True when the body was cut at the transport's ``max_content_size``.
        A truncated response still counts as ``success`` if its status is 2xx,
        so check this too before trusting the body to be complete.
        """
        return bool(self.headers.get("Truncated"))

    @property
    def text(self) -> str:
        if not self.body:
            return ""
        return self.body.decode("utf-8", errors="replace")

    def __iter__(self):
        # Unpacks like the (body, headers, request) triple it was built from
        return iter((self.body, self.headers, self.request))

    def __repr__(self) -> str:
        return f"<Response {self.status} {self.request.method} {self.request.url}>"


def default_build_response(body, headers, request) -> Response:
    """Package the fetch outcome verbatim."""
    return Response(body, headers, request)


def failure_headers(status: int, reason: str, url: str = "") -> dict:
    """Pseudo headers describing a request that produced no HTTP response."""
    return {"Status": status, "Reason": reason, "URL": url}


def status_of(headers: Mapping[str, Any]) -> int:
    """Read the ``Status`` pseudo header, treating a missing or bogus one as a transport error."""
    try:
        return int(headers.get("Status", STATUS_TRANSPORT_ERROR))
    except (TypeError, ValueError):
        return STATUS_TRANSPORT_ERROR
