"""HTTP client adapter that buffers the full response body."""

import logging
from types import TracebackType

import aiohttp
from aiohttp import ClientTimeout

from dispatcher.ports.http import HttpReply, RequestConfiguration

__all__ = ["HttpClient"]

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class HttpClient:
    """Single-session HTTP client.

    Features:
    - Context manager for proper resource cleanup.
    - One request per call, no retry.
    - Response body accumulated in memory until the stream ends.
    """

    def __init__(self) -> None:
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session)."""
        if self.session:
            await self.session.close()

    async def post(
        self,
        config: RequestConfiguration,
        body: bytes,
        timeout_in_sec: float | None = None,
    ) -> HttpReply:
        """Send one request and buffer its whole response body.

        Args:
            config: Request target and method.
            body: Already serialized JSON request body.
            timeout_in_sec: Total deadline; None disables it.

        Returns:
            Buffered reply.

        Raises:
            RuntimeError: If session not initialized.
            asyncio.TimeoutError: If the deadline passes.
            aiohttp exceptions: Network errors.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        client_timeout = ClientTimeout(total=timeout_in_sec)
        async with self.session.request(
            config.method,
            config.url,
            data=body,
            headers={"Content-Type": JSON_CONTENT_TYPE},
            timeout=client_timeout,
        ) as resp:
            logger.debug(f"Awaiting response body from {config.url} (status {resp.status})")
            buffer = bytearray()
            async for chunk in resp.content.iter_any():
                logger.debug(f"Received chunk of {len(chunk)} bytes")
                buffer.extend(chunk)

            return HttpReply(status_code=resp.status, body=bytes(buffer), charset=resp.charset)
