"""
Trailing-edge debounce timer built on asyncio tasks.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from notecoach.utils.logger import get_logger

logger = get_logger(__name__)


class DebounceTimer:
    """
    Cancellable trailing-edge timer.

    Each ``trigger`` call restarts the quiescence window and replaces the
    pending arguments; the callback runs once the window elapses without a
    new trigger. Only the waiting period can be cancelled: once the callback
    has started it runs to completion and a new trigger starts a fresh window.
    """

    def __init__(self, delay: float, callback: Callable[..., Awaitable[Any]]):
        """
        Initialize debounce timer.

        Args:
            delay: Quiescence period in seconds
            callback: Coroutine function called with the latest trigger arguments
        """
        self.delay = delay
        self.callback = callback
        self._waiter: asyncio.Task | None = None
        self._running: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """Whether a call is waiting for the quiescence window to elapse."""
        return self._waiter is not None and not self._waiter.done()

    def trigger(self, *args: Any) -> None:
        """Restart the window; the callback will receive ``args``."""
        self.cancel()
        self._waiter = asyncio.create_task(self._wait_then_fire(args))

    def cancel(self) -> bool:
        """
        Cancel the pending call, if any.

        Returns:
            True if a pending call was cancelled
        """
        if self.pending:
            self._waiter.cancel()
            self._waiter = None
            return True
        return False

    async def _wait_then_fire(self, args: tuple) -> None:
        await asyncio.sleep(self.delay)

        # Past this point the call is no longer cancellable by a new trigger
        task = asyncio.create_task(self.callback(*args))
        self._running.add(task)
        task.add_done_callback(self._on_callback_done)
        self._waiter = None

    def _on_callback_done(self, task: asyncio.Task) -> None:
        self._running.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Debounced callback failed",
                extra={"error": str(error), "error_type": type(error).__name__},
            )

    async def wait(self) -> None:
        """Wait for the pending window (if any) and every started callback."""
        while self.pending or self._running:
            tasks = set(self._running)
            if self.pending:
                tasks.add(self._waiter)
            await asyncio.wait(tasks)
