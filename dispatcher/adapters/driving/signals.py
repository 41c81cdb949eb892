"""Signal handling for cancelling an in-flight dispatch."""

import asyncio
import logging
import signal
from collections.abc import Callable

__all__ = ["cancel_on_signal"]

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGTERM, signal.SIGINT)


def cancel_on_signal(task: asyncio.Task) -> Callable[[], None]:
    """Cancel task when SIGTERM or SIGINT is received.

    Args:
        task: The dispatch task to cancel.

    Returns:
        Callable that removes the installed handlers.
    """
    loop = asyncio.get_running_loop()

    def handle_signal(sig: signal.Signals) -> None:
        logger.info(f"{sig.name} received, cancelling dispatch...")
        task.cancel()

    for sig in HANDLED_SIGNALS:
        loop.add_signal_handler(sig, handle_signal, sig)

    def remove() -> None:
        for sig in HANDLED_SIGNALS:
            loop.remove_signal_handler(sig)

    return remove
