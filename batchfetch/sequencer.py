"""
batchfetch.sequencer — Restore results to the input request order.
"""

from typing import Any, List, Sequence, Tuple

from batchfetch.errors import SequencingError

_MISSING = object()


def sequence_results(
    records: Sequence[Tuple[int, Any]],
    request_count: int,
    enabled: bool = True,
) -> List[Any]:
    """
    Order ``(index, result)`` records.

    Disabled: results come back in completion order.  Enabled: the list is
    aligned index-for-index with the input requests.  Matching goes by the
    recorded input index, never by comparing requests, so identical requests
    cannot be confused.  Any index that is out of range, duplicated or
    missing raises ``SequencingError``.
    """
    if not enabled:
        return [result for _, result in records]

    ordered: List[Any] = [_MISSING] * request_count
    for index, result in records:
        if not isinstance(index, int) or not 0 <= index < request_count:
            raise SequencingError(f"Result for unknown request #{index!r}")
        if ordered[index] is not _MISSING:
            raise SequencingError(f"Request #{index} has more than one result")
        ordered[index] = result

    missing = [i for i, result in enumerate(ordered) if result is _MISSING]
    if missing:
        raise SequencingError(
            f"{len(missing)} request(s) have no result (first missing: #{missing[0]})"
        )
    return ordered
