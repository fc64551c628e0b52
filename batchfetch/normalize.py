"""
batchfetch.normalize — Host identifiers used for interleaving and per-host limits.
"""

from urllib.parse import urlsplit


def host_key(url: str) -> str:
    """
    Return the host identifier of a URL:
      - Strip leading/trailing whitespace
      - Lowercase the hostname
      - Drop scheme, port, credentials and path

    Requests to ``http://Example.com`` and ``https://example.com:8443`` share
    the bucket ``example.com``.  URLs without a host map to ``""``.
    """
    url = url.strip()
    if not url:
        return ""
    parsed = urlsplit(url)
    return parsed.hostname.lower() if parsed.hostname else ""
