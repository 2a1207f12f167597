"""Host HTTP Client"""

import asyncio
from typing import Any

import httpx
import pybreaker

from ..core.logging_config import get_logger

logger = get_logger(__name__)


class HostUnavailableError(Exception):
    """Host callback failed or the breaker is open."""

    pass


class BreakerListener(pybreaker.CircuitBreakerListener):
    """Listener for circuit breaker state changes."""

    def state_change(self, cb, old_state, new_state):
        """Called when circuit breaker state changes."""
        logger.warning(
            "breaker_state_change",
            breaker=cb.name,
            from_state=str(old_state),
            to_state=str(new_state),
        )


class HostClient:
    """
    Talks to the embedding host over HTTP with circuit breaker protection.

    Implements the ``Host`` protocol. Every failure, whether transport,
    status or an open breaker, surfaces as ``HostUnavailableError``.
    """

    def __init__(self, host_url: str = "http://localhost:3000", timeout: float = 5.0) -> None:
        """
        Initialize host client with circuit breaker.

        Args:
            host_url: Base URL of the embedding host
            timeout: Request timeout in seconds
        """
        self.host_url = host_url.rstrip("/")
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout)
        self._breaker = pybreaker.CircuitBreaker(
            fail_max=5,
            reset_timeout=30,
            name="host-http",
            listeners=[BreakerListener()],
        )

        logger.info("client_init", url=self.host_url)

    def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        def _make_request() -> httpx.Response:
            response = self._client.request(method, f"{self.host_url}{path}", json=payload)
            response.raise_for_status()
            return response

        try:
            response = self._breaker.call(_make_request)
        except pybreaker.CircuitBreakerError as e:
            logger.error("host_request_failed", path=path, error="Circuit breaker open - host unavailable")
            raise HostUnavailableError("Host unavailable (circuit open)") from e
        except httpx.HTTPError as e:
            logger.warning("host_http_error", path=path, error=str(e))
            raise HostUnavailableError(f"Host request to {path} failed: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise HostUnavailableError(f"Host returned non-JSON body for {path}") from e

    async def _send(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        return await asyncio.to_thread(self._request, method, path, payload)

    async def get_host_capabilities(self) -> dict[str, Any] | None:
        data = await self._send("GET", "/capabilities")
        return data if isinstance(data, dict) else None

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        result = await self._send("POST", "/tools/call", {"name": name, "arguments": arguments})
        if isinstance(result, dict) and result.get("isError"):
            raise HostUnavailableError(f"Tool {name} reported an error")
        return result

    async def update_model_context(self, text: str) -> None:
        await self._send("POST", "/context", {"text": text})

    async def send_message(self, text: str) -> None:
        await self._send("POST", "/messages", {"text": text})

    def health_check(self) -> bool:
        """
        Check if host is reachable (bypasses circuit breaker).

        Returns:
            True if host is healthy
        """
        try:
            response = self._client.get(f"{self.host_url}/health", timeout=2.0)
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def close(self) -> None:
        """Close HTTP client."""
        self._client.close()
