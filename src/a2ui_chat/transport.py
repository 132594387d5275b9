"""HTTP transport for the remote agent.

One turn is one JSON ``POST``. The request echoes the catalogs the client can
render so the agent only emits components it knows how to paint::

    {
        "parts": [...],
        "metadata": {"clientUiCapabilities": {"supportedCatalogUris": [...]}},
        "context_id": "..."
    }

A success response is returned as decoded JSON without further validation;
``classify`` is responsible for interpreting it.
"""

from __future__ import annotations

from collections.abc import Iterable
from types import TracebackType
from typing import Any

import httpx
from loguru import logger

from .config import Settings
from .errors import TransportError
from .types import OutboundRequest, dump_part


class TransportClient:
    """Sends one request envelope per turn to the agent endpoint."""

    def __init__(
        self,
        endpoint_url: str,
        *,
        timeout: float = 60.0,
        supported_catalog_uris: Iterable[str] = (),
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint_url = endpoint_url
        self.supported_catalog_uris: list[str] = list(supported_catalog_uris)
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, settings: Settings, *, client: httpx.AsyncClient | None = None) -> TransportClient:
        return cls(
            settings.endpoint_url,
            timeout=settings.request_timeout_seconds,
            supported_catalog_uris=settings.supported_catalog_uris,
            client=client,
        )

    async def __aenter__(self) -> TransportClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def build_body(self, request: OutboundRequest, context_id: str | None = None) -> dict[str, Any]:
        body: dict[str, Any] = {
            "parts": [dump_part(part) for part in request.parts],
            "metadata": {
                "clientUiCapabilities": {
                    "supportedCatalogUris": list(self.supported_catalog_uris),
                },
            },
        }
        if context_id is not None:
            body["context_id"] = context_id
        return body

    async def send(self, request: OutboundRequest, context_id: str | None = None) -> dict[str, Any]:
        """Send one turn and return the decoded success envelope.

        Raises:
            TransportError: On network failure, a non-success status, or a
                success body that is not JSON
        """
        body = self.build_body(request, context_id)
        logger.debug(
            "transport.request url={} parts={} context_id={}",
            self.endpoint_url,
            len(request.parts),
            context_id,
        )
        try:
            response = await self._client.post(self.endpoint_url, json=body, timeout=self._timeout)
        except httpx.TimeoutException as exc:
            logger.warning("transport.timeout url={} timeout={}", self.endpoint_url, self._timeout)
            raise TransportError(f"agent request timed out after {self._timeout}s") from exc
        except httpx.RequestError as exc:
            logger.warning("transport.unreachable url={} error={}", self.endpoint_url, exc)
            raise TransportError(f"agent request failed: {exc}") from exc

        if response.is_success:
            try:
                return response.json()
            except ValueError as exc:
                raise TransportError("agent returned a non-JSON response", status_code=response.status_code) from exc

        raise self._error_from(response)

    @staticmethod
    def _error_from(response: httpx.Response) -> TransportError:
        message: str | None = None
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("error"):
            message = str(payload["error"])
        logger.warning("transport.error status={} error={}", response.status_code, message)
        if message is None:
            return TransportError(
                f"agent request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        return TransportError(message, status_code=response.status_code)
