"""
batchfetch.interleave — Round-robin ordering of requests across hosts.

A pool of workers consuming the interleaved list front to back spreads its
connections over every host instead of using up one host's per-host limit
while the others wait.
"""

from collections import OrderedDict, deque
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def _request_host(item) -> str:
    return item.host


def bucket_by_host(
    items: Iterable[T],
    key: Optional[Callable[[T], str]] = None,
) -> "OrderedDict[str, deque]":
    """
    Group items into per-host buckets.  Buckets are ordered by the first
    appearance of their host; each bucket keeps its items' input order.
    """
    key = key or _request_host
    buckets: "OrderedDict[str, deque]" = OrderedDict()
    for item in items:
        buckets.setdefault(key(item), deque()).append(item)
    return buckets


def interleave_by_host(
    items: Iterable[T],
    key: Optional[Callable[[T], str]] = None,
) -> List[T]:
    """
    Merge the per-host buckets round-robin: each round takes the head of
    every non-empty bucket, in bucket order, and drops buckets that run dry.

        [a1, a2, a3, b1, b2]  ->  [a1, b1, a2, b2, a3]
    """
    buckets = bucket_by_host(items, key)
    interleaved: List[T] = []

    while buckets:
        for host in list(buckets):
            bucket = buckets[host]
            interleaved.append(bucket.popleft())
            if not bucket:
                del buckets[host]

    return interleaved
