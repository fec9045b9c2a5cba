"""Player client: one connection, its router task, and the commands built on them."""

import asyncio
import contextlib
import itertools
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from gpmdp_remote.remote.auth import Authenticator
from gpmdp_remote.remote.errors import TransportError
from gpmdp_remote.remote.protocol import OutboundRequest
from gpmdp_remote.remote.rendezvous import PendingCall
from gpmdp_remote.remote.router import MessageRouter
from gpmdp_remote.remote.state import PlayerState, ReadinessGate, StateCache
from gpmdp_remote.remote.transport import Connection, Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PlayerClient:
    """Remote control for the player over an established connection.

    The router runs as a background task for the lifetime of the client. Command
    methods send one request and wait for the next result frame. Only one
    command may be in flight at a time.
    """

    def __init__(self, conn: Connection, *, client_name: str, credential: str | None = None) -> None:
        """Initialize the client. Call ``start()`` inside a running event loop before use.

        Args:
            conn: Connection to the player.
            client_name: Identifier sent in connect requests.
            credential: Credential from a previous interactive auth, if any.

        """
        self._conn = conn
        self._credential = credential
        self._cache = StateCache()
        self._gate = ReadinessGate()
        self._pending = PendingCall()
        self._router = MessageRouter(conn, self._cache, self._gate, self._pending)
        self._auth = Authenticator(conn, self._router.auth_events, client_name, until=self._until)
        self._request_ids = itertools.count(1)
        self._router_task: asyncio.Task[None] | None = None

    def start(self) -> None:
        """Start the router task."""
        self._router_task = asyncio.create_task(self._router.run(), name="gpmdp-router")

    async def close(self) -> None:
        """Stop the router task and close the connection."""
        if self._router_task is not None:
            self._router_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, TransportError):
                await self._router_task
        await self._conn.close()

    # --- Readiness ---

    async def wait_until_ready(self) -> None:
        """Wait until the first API_VERSION update shows the stream is alive."""
        await self._until(self._gate.first_seen.wait())

    async def wait_until_warm(self) -> None:
        """Wait until every tracked channel has been populated."""
        await self._until(self._gate.warm.wait())

    def status_snapshot(self) -> PlayerState:
        """Return the cached player state.

        Raises:
            NotInitializedError: Some tracked channels have not been seen yet.

        """
        self._gate.require_warm()
        return self._cache.snapshot()

    # --- Auth ---

    @property
    def has_stored_credential(self) -> bool:
        """Whether a credential from a previous auth was supplied."""
        return bool(self._credential)

    async def authenticate_with_stored_credential(self) -> None:
        """Re-assert identity with the stored credential. Does nothing without one."""
        if not self._credential:
            return
        await self._auth.reassert(self._credential, request_id=next(self._request_ids))

    async def run_interactive_auth(self, pin_prompt: Callable[[], str]) -> str:
        """Register with the player and return the issued credential.

        Args:
            pin_prompt: Blocking callable that asks the operator for the PIN shown by the player.

        Raises:
            InvalidPinError: The player rejected the PIN.
            UnexpectedAuthResponseError: The player answered with a non-string payload.

        """
        return await self._auth.run(pin_prompt, request_ids=(next(self._request_ids), next(self._request_ids)))

    # --- Playback ---

    async def pause(self) -> None:
        """Pause playback. No-op if nothing is playing."""
        if not self._cache.snapshot().play_state:
            return
        await self._call("playback", "playPause")

    async def play(self) -> None:
        """Resume playback. No-op if already playing."""
        if self._cache.snapshot().play_state:
            return
        await self._call("playback", "playPause")

    async def toggle_shuffle(self) -> None:
        """Toggle shuffle mode."""
        await self._call("playback", "toggleShuffle")

    async def toggle_repeat(self) -> None:
        """Toggle repeat mode."""
        await self._call("playback", "toggleRepeat")

    async def next(self) -> None:
        """Skip to the next track."""
        await self._call("playback", "forward")

    async def prev(self) -> None:
        """Go back to the previous track."""
        await self._call("playback", "rewind")

    # --- Private helpers ---

    async def _call(self, namespace: str, method: str) -> None:
        """Send a request and wait for the next result frame.

        No timeout: if the player never answers, this waits until the connection dies.

        Raises:
            CallInProgressError: Another call is still waiting for its result.
            EncodingError: The request could not be serialized.
            TransportError: The connection failed before the result arrived.

        """
        waiter = self._pending.arm()
        try:
            await self._conn.send(OutboundRequest(namespace=namespace, method=method, request_id=next(self._request_ids)))
            await self._until(waiter)
        finally:
            self._pending.disarm()
        logger.debug("%s.%s completed", namespace, method)

    async def _until(self, aw: Awaitable[T]) -> T:
        """Wait for a router-produced signal, failing if the router dies first.

        Raises:
            TransportError: The router stopped before the signal fired.

        """
        if self._router_task is None:
            msg = "PlayerClient.start() was not called"
            raise RuntimeError(msg)
        fut = asyncio.ensure_future(aw)
        await asyncio.wait({fut, self._router_task}, return_when=asyncio.FIRST_COMPLETED)
        if fut.done():
            return fut.result()
        fut.cancel()
        if not self._router_task.cancelled() and (exc := self._router_task.exception()) is not None:
            raise TransportError(str(exc)) from exc
        raise TransportError("Connection to the player was lost.")


@asynccontextmanager
async def open_client(url: str, *, client_name: str, credential: str | None = None) -> AsyncIterator[PlayerClient]:
    """Connect to the player, start the router, and wait until the state stream is alive.

    Raises:
        PlayerConnectionError: The connection could not be established.
        TransportError: The connection dropped before the first state update.

    """
    transport = await Transport.connect(url)
    client = PlayerClient(transport, client_name=client_name, credential=credential)
    client.start()
    try:
        await client.wait_until_ready()
        yield client
    finally:
        await client.close()
