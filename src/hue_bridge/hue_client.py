"""HTTP transport used by the bridge session."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

import httpx

from .errors import HueConnectionError, HueTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10000

# Authenticated URLs carry the username as the segment right after /api/.
_USERNAME_SEGMENT = re.compile(r"^(https?://[^/]+/api/)[^/]+(/)")


def redact_url(url: str) -> str:
    """Replace the username in an authenticated bridge URL with ***."""
    return _USERNAME_SEGMENT.sub(r"\1***\2", url, count=1)


def _timeout_from_ms(timeout_ms: int) -> httpx.Timeout:
    if timeout_ms <= 0:
        return httpx.Timeout(None)
    seconds = timeout_ms / 1000.0
    return httpx.Timeout(connect=seconds, read=seconds, write=seconds, pool=seconds)


@dataclass(frozen=True)
class HttpResult:
    status_code: int
    body: str


class HueHttpClient:
    """Blocking HTTP client for plain-HTTP JSON requests to the bridge."""

    def __init__(
        self,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout = _timeout_from_ms(timeout_ms)
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def set_timeout(self, timeout_ms: int) -> None:
        """Set the connect and read timeout in milliseconds, 0 for none."""
        self.timeout = _timeout_from_ms(timeout_ms)
        if self._client:
            self._client.timeout = self.timeout

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    def _request(self, method: str, url: str, body: Optional[str] = None) -> HttpResult:
        client = self._get_client()
        content = body.encode("utf-8") if body is not None else None

        logger.debug(f"{method} {redact_url(url)}")
        try:
            response = client.request(method, url, content=content)
        except httpx.TimeoutException as e:
            raise HueTimeoutError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            raise HueConnectionError(f"Request failed: {e}") from e

        logger.debug(f"{method} returned HTTP {response.status_code}")
        return HttpResult(status_code=response.status_code, body=response.text)

    def get(self, url: str) -> HttpResult:
        return self._request("GET", url)

    def put(self, url: str, body: str) -> HttpResult:
        return self._request("PUT", url, body)

    def post(self, url: str, body: str) -> HttpResult:
        return self._request("POST", url, body)

    def delete(self, url: str) -> HttpResult:
        return self._request("DELETE", url)
