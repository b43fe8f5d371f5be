"""Shared HTTP client wrapper for the rate services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import requests
from requests import Response, Session
from requests.exceptions import ConnectionError, JSONDecodeError, RequestException, Timeout

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class HTTPClientError(RuntimeError):
    """Raised when the service answers with an error status or an unreadable body."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class HTTPTransportError(HTTPClientError):
    """Raised when the request never completed (timeout, connection failure)."""


@dataclass(frozen=True)
class HTTPClientConfig:
    """Configuration for the shared HTTP client."""

    base_url: str
    timeout: Optional[float] = None


class HTTPClient:
    """Small HTTP client issuing a single attempt per request."""

    def __init__(
        self,
        config: HTTPClientConfig,
        session: Optional[Session] = None,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()

    def get(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        timeout: Optional[float] = _UNSET,
    ) -> Any:
        url = self._build_url(path)
        effective_timeout = self._config.timeout if timeout is _UNSET else timeout
        try:
            response = self._session.get(url, params=params, timeout=effective_timeout)
        except (Timeout, ConnectionError) as exc:
            logger.warning("HTTP request to %s did not complete: %s", url, exc)
            raise HTTPTransportError(f"Failed to reach {url}: {exc}") from exc
        except RequestException as exc:
            raise HTTPClientError(f"Failed to fetch {url}: {exc}") from exc

        return self._handle_response(response)

    def _build_url(self, path: str) -> str:
        base = self._config.base_url.rstrip("/")
        suffix = path.lstrip("/")
        return f"{base}/{suffix}"

    @staticmethod
    def _handle_response(response: Response) -> Any:
        status = response.status_code
        if status >= 500:
            raise HTTPClientError(f"Server error {status}", status_code=status)
        if status >= 400:
            raise HTTPClientError(f"Client error {status}: {response.text}", status_code=status)

        try:
            payload: Dict[str, Any] = response.json()
        except (JSONDecodeError, ValueError) as exc:
            raise HTTPClientError("Invalid JSON response", status_code=status) from exc

        return payload
