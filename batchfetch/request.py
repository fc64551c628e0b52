"""
batchfetch.request — HTTP request values handed to a download run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from collections import abc
from typing import Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import urlencode

from batchfetch.normalize import host_key

FormData = Union[Mapping[str, str], Sequence[Tuple[str, str]], str, bytes]


@dataclass(frozen=True, eq=False)
class Request:
    """
    One unit of work.  Immutable once built; compared by identity, so two
    requests for the same URL are still two separate downloads.
    """

    method: str
    url: str
    header_items: Tuple[Tuple[str, str], ...] = ()
    body: Optional[bytes] = None
    host: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "host", host_key(self.url))

    @property
    def headers(self) -> dict:
        """A fresh dict of the request headers."""
        return dict(self.header_items)

    def __repr__(self) -> str:
        return f"<Request {self.method} {self.url}>"


def make_request(
    method: str,
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    body: Optional[Union[str, bytes]] = None,
) -> Request:
    """Build a ``Request``, encoding a text body as UTF-8."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    header_items = tuple((headers or {}).items())
    return Request(method=method, url=url, header_items=header_items, body=body)


def GET(url: str, headers: Optional[Mapping[str, str]] = None) -> Request:
    return make_request("GET", url, headers)


def HEAD(url: str, headers: Optional[Mapping[str, str]] = None) -> Request:
    return make_request("HEAD", url, headers)


def DELETE(url: str, headers: Optional[Mapping[str, str]] = None) -> Request:
    return make_request("DELETE", url, headers)


def POST(
    url: str,
    data: Optional[FormData] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Request:
    """
    Build a POST request.  Mappings and pair sequences are form-encoded
    and get a matching ``Content-Type`` unless one was given.
    """
    return _with_form_body("POST", url, data, headers)


def PUT(
    url: str,
    data: Optional[FormData] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Request:
    return _with_form_body("PUT", url, data, headers)


def _with_form_body(method, url, data, headers):
    headers = dict(headers or {})
    if data is None or isinstance(data, (str, bytes)):
        return make_request(method, url, headers, data)

    body = urlencode(list(data.items()) if isinstance(data, abc.Mapping) else list(data))
    if not any(name.lower() == "content-type" for name in headers):
        headers["Content-Type"] = "application/x-www-form-urlencoded"
    return make_request(method, url, headers, body)
