from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from app.providers.base import NetworkError, UpstreamError
from app.providers.http_client import (
    HTTPClient,
    HTTPClientConfig,
    HTTPClientError,
    HTTPTransportError,
)

logger = logging.getLogger(__name__)


class RatesAPIClientConfig:
    """Configuration parameters for a rate service endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        access_key: str = "",
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.access_key = access_key


class RatesAPIClient:
    """JSON client for exchangerate-style services built on the shared HTTP wrapper."""

    def __init__(self, config: RatesAPIClientConfig, client: Optional[HTTPClient] = None) -> None:
        self._config = config
        self._client = client or HTTPClient(
            HTTPClientConfig(base_url=config.base_url, timeout=config.timeout)
        )

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        query = dict(params or {})
        if self._config.access_key:
            query["access_key"] = self._config.access_key

        try:
            payload = self._client.get(path, params=query or None)
        except HTTPTransportError as exc:
            raise NetworkError(str(exc)) from exc
        except HTTPClientError as exc:
            raise UpstreamError(str(exc)) from exc

        if not isinstance(payload, dict):
            raise UpstreamError(f"Unexpected payload type from {self._config.base_url}")

        if not payload.get("success", True):
            error_info = payload.get("error") or {}
            raise UpstreamError(f"Rate service error payload: {error_info}")

        return payload
