"""Configuration loading from environment variables."""

import logging
import math
import os
from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from dispatcher.ports.http import RequestConfiguration

__all__ = ["DEFAULT_PAYLOAD", "Settings", "load_settings"]

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_PAYLOAD: dict[str, Any] = {"somedata": "crap"}


class Settings(BaseModel):
    """Runtime configuration for the dispatcher.

    Attributes:
        host: Server host.
        port: Server TCP port.
        path: Request target on the server.
        method: HTTP method (POST only).
        timeout_in_sec: Deadline for the exchange; None waits forever.
        payload: JSON value sent as request body.
    """

    host: str = Field(default="localhost", min_length=1, description="Server host.")
    port: int = Field(default=8080, gt=0, le=65535, description="Server TCP port.")
    path: str = Field(default="/append", description="Request target, starting with '/'.")
    method: Literal["POST"] = "POST"
    timeout_in_sec: float | None = Field(
        default=30.0,
        gt=0,
        allow_inf_nan=False,
        description="Total deadline in seconds. None disables the timeout.",
    )
    payload: Any = Field(default_factory=lambda: dict(DEFAULT_PAYLOAD))

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Validate that path is an origin-form request target.

        Raises:
            ValueError: If path does not start with '/'.
        """
        if not v.startswith("/"):
            raise ValueError(f"Path must start with '/' (got: {v!r})")
        return v

    def to_request_configuration(self) -> RequestConfiguration:
        """Build the immutable request target from these settings."""
        return RequestConfiguration(host=self.host, port=self.port, path=self.path, method=self.method)


def load_settings() -> Settings:
    """Load and validate settings from environment (and .env file).

    Optional environment variables:
    - DISPATCH_HOST: Server host (default localhost).
    - DISPATCH_PORT: Server port, integer in 1..65535 (default 8080).
    - DISPATCH_PATH: Request path (default /append).
    - DISPATCH_TIMEOUT_SECONDS: Deadline in seconds, 0 disables it (default 30).

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If a numeric variable cannot be parsed.
        ValueError: If configuration is invalid.
    """
    overrides: dict[str, Any] = {}

    if host := os.getenv("DISPATCH_HOST"):
        overrides["host"] = host
    if path := os.getenv("DISPATCH_PATH"):
        overrides["path"] = path

    port_raw = os.getenv("DISPATCH_PORT")
    if port_raw:
        try:
            overrides["port"] = int(port_raw)
        except ValueError as e:
            raise RuntimeError(f"DISPATCH_PORT must be an integer (got: {port_raw})") from e

    timeout_raw = os.getenv("DISPATCH_TIMEOUT_SECONDS")
    if timeout_raw:
        try:
            timeout = float(timeout_raw)
            if not math.isfinite(timeout) or timeout < 0:
                raise ValueError("Must be finite and not negative")
        except ValueError as e:
            raise RuntimeError(
                f"DISPATCH_TIMEOUT_SECONDS must be a finite non-negative number (got: {timeout_raw})"
            ) from e
        overrides["timeout_in_sec"] = timeout or None

    settings = Settings(**overrides)

    logger.info(
        f"Dispatcher configured: target={settings.method} "
        f"http://{settings.host}:{settings.port}{settings.path}, "
        f"timeout={settings.timeout_in_sec or '<disabled>'}"
    )

    return settings
