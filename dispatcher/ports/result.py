"""Dispatch result port definition (DTO)."""

from dataclasses import dataclass

from dispatcher.ports.errors import DispatchError

__all__ = ["DispatchResult"]


@dataclass(slots=True, frozen=True)
class DispatchResult:
    """Outcome of a single dispatch.

    Attributes:
        status_code: HTTP status code when a response arrived; None otherwise.
        body: Decoded response body when a response arrived; None otherwise.
        error: Failure reason; None on success.
    """

    status_code: int | None = None
    body: str | None = None
    error: DispatchError | None = None

    @property
    def ok(self) -> bool:
        """True when the dispatch completed with a 2xx response."""
        return self.error is None
