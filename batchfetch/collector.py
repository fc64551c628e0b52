"""
batchfetch.collector — Thread-safe accumulation of finished results.
"""

import threading
from typing import Any, List, Tuple

from batchfetch.errors import SequencingError


class ResultCollector:
    """
    Append-only store of ``(index, result)`` pairs in completion order.
    ``index`` is the position of the originating request in the caller's
    input; it travels beside the result so the response builder is free to
    return anything.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: List[Tuple[int, Any]] = []
        self._seen = set()

    def record(self, index: int, result: Any) -> None:
        with self._lock:
            if index in self._seen:
                raise SequencingError(f"Request #{index} was recorded twice")
            self._seen.add(index)
            self._records.append((index, result))

    def records(self) -> List[Tuple[int, Any]]:
        """Snapshot of the ``(index, result)`` pairs recorded so far."""
        with self._lock:
            return list(self._records)

    def results(self) -> List[Any]:
        """Results in completion order."""
        return [result for _, result in self.records()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
