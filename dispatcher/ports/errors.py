"""Failure taxonomy for a dispatch (port definitions)."""

__all__ = [
    "ConnectionFailedError",
    "DispatchError",
    "DispatchTimeoutError",
    "HttpStatusError",
    "PayloadError",
]


class DispatchError(Exception):
    """Base class for every dispatch failure."""


class PayloadError(DispatchError, ValueError):
    """Payload cannot be serialized to JSON."""


class ConnectionFailedError(DispatchError):
    """Server unreachable: connection refused, DNS failure or disconnect."""


class DispatchTimeoutError(DispatchError):
    """No complete response before the configured deadline."""


class HttpStatusError(DispatchError):
    """Server answered with a non-2xx status.

    Attributes:
        status_code: HTTP status code returned by the server.
        body: Decoded response body.
    """

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"Server responded with HTTP {status_code}")
        self.status_code = status_code
        self.body = body
