"""Challenge/response handshake that registers this client with the player."""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Awaitable, Callable

from gpmdp_remote.remote.errors import InvalidPinError, UnexpectedAuthResponseError
from gpmdp_remote.remote.protocol import OutboundRequest
from gpmdp_remote.remote.transport import Connection

logger = logging.getLogger(__name__)

# Phase-2 answer meaning the PIN was wrong
CODE_REQUIRED = "CODE_REQUIRED"


def _prompt_in_thread(pin_prompt: Callable[[], str]) -> asyncio.Future[str]:
    """Run a blocking prompt on a daemon thread and return a future for its answer.

    asyncio.run joins the default executor on exit; a daemon thread lets a failed
    command exit while the prompt is still blocked on the terminal.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def deliver(result: str | None, exc: Exception | None) -> None:
        if fut.done():
            return
        if exc is not None:
            fut.set_exception(exc)
        else:
            fut.set_result(result or "")

    def target() -> None:
        try:
            pin = pin_prompt()
        except Exception as e:  # noqa: BLE001
            result: tuple[str | None, Exception | None] = (None, e)
        else:
            result = (pin, None)
        # The loop is gone once the command has already failed
        with contextlib.suppress(RuntimeError):
            loop.call_soon_threadsafe(deliver, *result)

    threading.Thread(target=target, name="pin-prompt", daemon=True).start()
    return fut


def connect_request(*arguments: str, request_id: int = 0) -> OutboundRequest:
    """Build a connect/connect request; every handshake step uses the same method."""
    return OutboundRequest(namespace="connect", method="connect", arguments=arguments, request_id=request_id)


class Authenticator:
    """Runs the two-phase handshake over the router's connect-channel events.

    Phase 1 announces the client name; the player then shows a PIN on screen.
    Phase 2 sends the name with the PIN typed by the operator and receives the
    credential. A stored credential skips both phases.
    """

    def __init__(
        self,
        conn: Connection,
        events: asyncio.Queue[object],
        client_name: str,
        *,
        until: Callable[[Awaitable[object]], Awaitable[object]],
    ) -> None:
        """Initialize the authenticator.

        Args:
            conn: Connection to send connect requests on.
            events: Connect-channel payloads delivered by the router.
            client_name: Identifier the player shows and remembers the credential for.
            until: Waits for an awaitable, failing if the router dies first.

        """
        self._conn = conn
        self._events = events
        self._client_name = client_name
        self._until = until

    async def reassert(self, credential: str, *, request_id: int) -> None:
        """Present a stored credential. Fire-and-forget: the player's answer is not awaited."""
        await self._conn.send(connect_request(self._client_name, credential, request_id=request_id))
        logger.info("Sent stored credential for %s", self._client_name)

    async def run(self, pin_prompt: Callable[[], str], *, request_ids: tuple[int, int]) -> str:
        """Perform the interactive handshake and return the issued credential.

        The PIN prompt runs in a daemon thread so the router keeps ingesting while the operator types,
        and a dropped connection fails the handshake without waiting for the operator.

        Raises:
            InvalidPinError: The player rejected the PIN.
            UnexpectedAuthResponseError: The player answered with a non-string payload.
            TransportError: The connection dropped during the handshake.

        """
        first_id, second_id = request_ids
        await self._conn.send(connect_request(self._client_name, request_id=first_id))
        await self._until(self._events.get())
        logger.info("Player is waiting for a PIN")

        pin = await self._until(_prompt_in_thread(pin_prompt))

        await self._conn.send(connect_request(self._client_name, pin, request_id=second_id))
        response = await self._until(self._events.get())
        if not isinstance(response, str):
            raise UnexpectedAuthResponseError(f"Invalid response received: {response!r}")
        if response == CODE_REQUIRED:
            logger.warning("Player rejected the PIN")
            raise InvalidPinError("Invalid PIN entered.")
        logger.info("Authenticated as %s", self._client_name)
        return response
