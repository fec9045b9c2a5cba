"""Single-slot rendezvous between a command handler and the router."""

import asyncio
import logging

from gpmdp_remote.remote.errors import CallInProgressError

logger = logging.getLogger(__name__)


class PendingCall:
    """At most one outstanding method call, completed by the next result frame.

    Result frames carry no reliable correlation to the request, so any result
    completes whatever call is armed. A result with nothing armed is dropped.
    """

    def __init__(self) -> None:
        self._waiter: asyncio.Future[None] | None = None

    @property
    def is_armed(self) -> bool:
        """Whether a call is waiting for its result."""
        return self._waiter is not None and not self._waiter.done()

    def arm(self) -> asyncio.Future[None]:
        """Reserve the slot before sending a request, so an early result is not lost.

        Raises:
            CallInProgressError: Another call is still waiting for its result.

        """
        if self.is_armed:
            raise CallInProgressError("Another playback command is still waiting for the player to respond.")
        self._waiter = asyncio.get_running_loop().create_future()
        return self._waiter

    def complete(self) -> bool:
        """Release the armed call. Never blocks. Return False if nothing was waiting."""
        waiter = self._waiter
        if waiter is None or waiter.done():
            logger.debug("Result frame with no pending call, dropped")
            return False
        waiter.set_result(None)
        return True

    def disarm(self) -> None:
        """Free the slot after the waiting handler resumed or gave up."""
        self._waiter = None
