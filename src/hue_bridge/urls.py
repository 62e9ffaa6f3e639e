"""URL construction for the bridge REST API."""

from typing import Optional
from urllib.parse import quote


def encode_segment(value: str) -> str:
    """Percent-encode a single path segment as UTF-8, including ``/``."""
    return quote(value, safe="", encoding="utf-8")


def resource_path(collection: str, *segments: str) -> str:
    """Join a collection name with identifiers, encoding each identifier.

    >>> resource_path("lights", "1/2", "state")
    'lights/1%2F2/state'

    The trailing literal sub-resources (``state``, ``action``, ``name``) pass
    through encoding unchanged.
    """
    return "/".join([collection, *(encode_segment(s) for s in segments)])


def build_url(address: str, username: Optional[str], path: str) -> str:
    """Build the absolute URL for ``path``, authenticated if a username is set."""
    if username is None:
        return f"http://{address}/api/{path}"
    return f"http://{address}/api/{encode_segment(username)}/{path}"
