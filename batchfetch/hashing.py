"""
batchfetch.hashing — Content hashing for response summaries.
"""

import hashlib
from typing import Optional, Union


def compute_hash(content: Optional[Union[bytes, str]]) -> Optional[str]:
    """Compute SHA-256 hash of a response body; ``None`` for missing bodies."""
    if content is None:
        return None
    if isinstance(content, str):
        content = content.encode("utf-8", errors="replace")
    return hashlib.sha256(content).hexdigest()
