"""
Cooperative cancellation for long-running optimisation.
"""

import asyncio
import logging

from domain.errors import OptimizationCancelledError

logger = logging.getLogger("squad_balancer.cancellation")


class CancellationToken:
    """
    Flag a host sets to stop an optimisation at its next suspension point.

    Engines call ``checkpoint()`` every few thousand iterations; it yields to
    the event loop and then raises OptimizationCancelledError if the token
    has been cancelled. Native task cancellation also works because the
    yield is a real ``await``.
    """

    def __init__(self):
        self._cancelled = False
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: str | None = None) -> None:
        if not self._cancelled:
            logger.warning(f"Optimisation cancellation requested: {reason or 'no reason given'}")
        self._cancelled = True
        self.reason = reason

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise OptimizationCancelledError(self.reason or "Optimisation cancelled")


async def checkpoint(token: CancellationToken | None = None) -> None:
    """Yield control to the host loop, then honour the token."""
    await asyncio.sleep(0)
    if token is not None:
        token.raise_if_cancelled()
