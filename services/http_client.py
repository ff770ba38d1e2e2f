"""Adapter around ``httpx`` for the JSON APIs used by the lookup skills."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from core.errors import UpstreamUnavailable

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class JSONClient:
    """Thin wrapper around :class:`httpx.Client` that only speaks JSON.

    Every failure mode (transport error, timeout, non-success status,
    undecodable body) surfaces as :class:`UpstreamUnavailable` so callers
    can fall back with a single ``except`` clause.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.timeout = timeout
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers=dict(headers or {"Accept": "application/json"}),
        )

    def get_json(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Return the decoded JSON body of ``GET url``."""
        LOGGER.debug("GET %s", url)
        try:
            response = self._client.get(url, params=dict(params or {}))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            LOGGER.warning("Request to %s failed with HTTP %s", url, status)
            raise UpstreamUnavailable(f"HTTP {status} from {url}", status_code=status) from exc
        except httpx.HTTPError as exc:
            LOGGER.warning("Request to %s failed: %s", url, exc)
            raise UpstreamUnavailable(f"Request to {url} failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamUnavailable(f"Malformed JSON from {url}") from exc

    @property
    def closed(self) -> bool:
        return self._client.is_closed

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "JSONClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
