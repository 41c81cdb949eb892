"""Settings port definition (DTO)."""

from dataclasses import dataclass
from typing import Any

from dispatcher.ports.http import RequestConfiguration

__all__ = ["SettingsPort"]


@dataclass
class SettingsPort:
    """Runtime settings for the dispatcher.

    Decouples core from concrete configuration sources, enabling
    easy testing and implementation swapping.

    Attributes:
        request: Where and how the request is sent.
        payload: JSON-serializable value sent as request body.
        timeout_in_sec: Deadline for the whole exchange; None waits forever.
    """

    request: RequestConfiguration
    payload: Any
    timeout_in_sec: float | None = None
