"""Request dispatcher: send one POST and emit the buffered response body."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp

from dispatcher.ports.errors import (
    ConnectionFailedError,
    DispatchError,
    DispatchTimeoutError,
    HttpStatusError,
    PayloadError,
)
from dispatcher.ports.http import HttpReply, RequestConfiguration
from dispatcher.ports.result import DispatchResult

__all__ = ["dispatch", "encode_payload", "SendFn"]

logger = logging.getLogger(__name__)

SendFn = Callable[[RequestConfiguration, bytes, float | None], Awaitable[HttpReply]]


def encode_payload(payload: Any) -> bytes:
    """Serialize payload to compact UTF-8 JSON.

    Args:
        payload: JSON-serializable value.

    Returns:
        Encoded request body.

    Raises:
        PayloadError: If payload cannot be represented as JSON.
    """
    try:
        text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise PayloadError(f"Payload is not JSON-serializable: {e}") from e
    return text.encode("utf-8")


async def dispatch(
    config: RequestConfiguration,
    payload: Any,
    *,
    send_fn: SendFn,
    sink: Callable[[str], None] = print,
    timeout_in_sec: float | None = None,
) -> DispatchResult:
    """Send exactly one request and emit the full response body on success.

    Steps:
    1. Serialize payload (before any network I/O).
    2. Send it once through send_fn and wait for the buffered reply.
    3. Hand the decoded body to sink if the status is 2xx.

    Args:
        config: Request target.
        payload: JSON-serializable request body.
        send_fn: Async transport used to send the request.
        sink: Receives the decoded body once, on success only.
        timeout_in_sec: Deadline for the exchange; None waits forever.

    Returns:
        Result with status and body, or the error that stopped the dispatch.

    Notes:
        Transport and output errors never escape; cancellation always does.
    """
    try:
        body = encode_payload(payload)
    except PayloadError as e:
        logger.debug(f"Refusing to send request: {e}")
        return DispatchResult(error=e)

    logger.info(f"Dispatching {config.method} {config.url} ({len(body)} bytes)")

    try:
        reply = await send_fn(config, body, timeout_in_sec)
    except asyncio.TimeoutError as e:
        return _failed(
            DispatchTimeoutError(f"No response from {config.url} within {timeout_in_sec}s"),
            cause=e,
        )
    except aiohttp.ClientConnectionError as e:
        return _failed(ConnectionFailedError(f"Cannot reach {config.url}: {e}"), cause=e)
    except aiohttp.ClientError as e:
        return _failed(DispatchError(f"HTTP transport error for {config.url}: {e}"), cause=e)

    text = reply.text()
    logger.debug(f"Response complete: status={reply.status_code}, {len(reply.body)} bytes")

    if not reply.is_success:
        return _failed(HttpStatusError(reply.status_code, text), status_code=reply.status_code)

    try:
        sink(text)
    except OSError as e:
        return _failed(
            DispatchError(f"Cannot write response body: {e}"),
            cause=e,
            status_code=reply.status_code,
        )
    return DispatchResult(status_code=reply.status_code, body=text)


def _failed(
    err: DispatchError,
    *,
    cause: BaseException | None = None,
    status_code: int | None = None,
) -> DispatchResult:
    err.__cause__ = cause
    logger.debug(f"Dispatch failed: {err!r}")
    body = err.body if isinstance(err, HttpStatusError) else None
    return DispatchResult(status_code=status_code, body=body, error=err)
