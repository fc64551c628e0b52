"""
tests/conftest.py — Shared fixtures and fake fetch capabilities for the test suite.
"""

import threading
import time
from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from batchfetch.request import GET


class FakeFetch:
    """
    Stand-in for the transport: answers ``200 OK`` with the URL as body,
    after an optional per-URL delay, and tracks how many calls overlap.
    """

    def __init__(self, delays=None, failures=None, errors=None):
        self.delays = delays or {}
        self.failures = failures or {}
        self.errors = errors or {}
        self.calls = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def __call__(self, request):
        with self._lock:
            self.calls.append(request)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            time.sleep(self.delays.get(request.url, 0))
            if request.url in self.errors:
                raise self.errors[request.url]
            if request.url in self.failures:
                status, reason = self.failures[request.url]
                return None, {"Status": status, "Reason": reason, "URL": request.url}
            return request.url.encode("utf-8"), {"Status": 200, "Reason": "OK", "URL": request.url}
        finally:
            with self._lock:
                self.active -= 1


def mock_http_response(content: bytes = b"", status_code: int = 200, headers=None, reason="OK"):
    """Return a mock streaming ``requests.Response`` usable as a context manager."""
    resp = MagicMock(spec=requests.Response)
    resp.__enter__ = MagicMock(return_value=resp)
    resp.__exit__ = MagicMock(return_value=False)
    resp.status_code = status_code
    resp.reason = reason
    resp.url = "https://example.com/final"
    resp.headers = CaseInsensitiveDict(headers or {"Content-Type": "text/plain"})
    resp.iter_content = MagicMock(return_value=[content] if content else [])
    return resp


@pytest.fixture
def fake_fetch():
    return FakeFetch()


@pytest.fixture
def two_host_requests():
    """Three requests for host a, then two for host b."""
    return [
        GET("https://a.example/1"),
        GET("https://a.example/2"),
        GET("https://a.example/3"),
        GET("https://b.example/1"),
        GET("https://b.example/2"),
    ]


@pytest.fixture
def seven_requests():
    return [GET(f"https://host{i % 3}.example/page{i}") for i in range(7)]
