"""Application entrypoint."""

import asyncio
import logging

from dispatcher.adapters.driven.config.settings import load_settings
from dispatcher.adapters.driven.http.client import HttpClient
from dispatcher.adapters.driven.logging.logging_config import configure_logs
from dispatcher.adapters.driving.signals import cancel_on_signal
from dispatcher.core.dispatch import dispatch
from dispatcher.ports.settings import SettingsPort

__all__ = ["main", "run"]

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


async def main() -> int:
    """Send the configured request once and print the response body.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration.
    3. Dispatch the request as a cancellable task.
    4. Map the outcome to a process exit status.

    Returns:
        0 on success, 1 on any failure.
    """
    configure_logs()

    try:
        config = load_settings()
    except (RuntimeError, ValueError) as exc:
        # Validation errors span several lines; keep the report on one
        reason = " ".join(str(exc).split())
        logger.error(
            "Configuration error: %s. Hint: check DISPATCH_HOST, DISPATCH_PORT, "
            "DISPATCH_PATH and DISPATCH_TIMEOUT_SECONDS.",
            reason,
        )
        return EXIT_FAILURE

    settings_port = SettingsPort(
        request=config.to_request_configuration(),
        payload=config.payload,
        timeout_in_sec=config.timeout_in_sec,
    )

    async with HttpClient() as http:
        task = asyncio.get_running_loop().create_task(
            dispatch(
                settings_port.request,
                settings_port.payload,
                send_fn=http.post,
                timeout_in_sec=settings_port.timeout_in_sec,
            )
        )
        remove_handlers = cancel_on_signal(task)
        try:
            result = await task
        except asyncio.CancelledError:
            logger.warning("Dispatch cancelled before the response completed.")
            return EXIT_FAILURE
        finally:
            remove_handlers()

    if not result.ok:
        logger.error(f"Dispatch failed: {result.error}")
        return EXIT_FAILURE

    return EXIT_OK


def run() -> None:
    """Console script entrypoint."""
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user (Ctrl+C).")
        raise SystemExit(EXIT_FAILURE) from None


if __name__ == "__main__":
    run()
