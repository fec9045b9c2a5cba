"""Background loop that reads every frame from the player and routes it."""

import asyncio
import logging

from pydantic import ValidationError

from gpmdp_remote.remote.protocol import Channel, InboundMessage
from gpmdp_remote.remote.rendezvous import PendingCall
from gpmdp_remote.remote.state import ReadinessGate, StateCache
from gpmdp_remote.remote.transport import Connection

logger = logging.getLogger(__name__)


class MessageRouter:
    """Sole reader of the connection.

    Each frame goes to exactly one place: the state cache, the pending call, or
    the auth event queue. Dispatch never waits on anything, so a slow command
    handler cannot stall ingestion.
    """

    def __init__(self, conn: Connection, cache: StateCache, gate: ReadinessGate, pending: PendingCall) -> None:
        """Initialize the router.

        Args:
            conn: Connection to read frames from.
            cache: State cache to apply updates to.
            gate: Readiness signals to fire.
            pending: Rendezvous to complete on result frames.

        """
        self._conn = conn
        self._cache = cache
        self._gate = gate
        self._pending = pending
        # Payloads of "connect" channel updates, consumed by the authenticator
        self.auth_events: asyncio.Queue[object] = asyncio.Queue()

    async def run(self) -> None:
        """Receive and dispatch frames until the connection fails.

        Raises:
            TransportError: The connection closed or delivered a malformed frame.

        """
        while True:
            try:
                message = await self._conn.receive()
            except Exception:
                logger.exception("Listen failed")
                raise
            self.dispatch(message)

    def dispatch(self, message: InboundMessage) -> None:
        """Route one frame."""
        if message.is_result:
            self._pending.complete()
            return

        channel = Channel.parse(message.channel)
        match channel:
            case (
                Channel.API_VERSION
                | Channel.PLAY_STATE
                | Channel.VOLUME
                | Channel.SHUFFLE
                | Channel.REPEAT
                | Channel.TRACK
                | Channel.RATING
                | Channel.TIME
            ):
                self._apply(channel, message.payload)
            case (
                Channel.LIBRARY
                | Channel.LYRICS
                | Channel.PLAYLISTS
                | Channel.QUEUE
                | Channel.SEARCH_RESULTS
                | Channel.SETTINGS_THEME
                | Channel.SETTINGS_THEME_COLOR
                | Channel.SETTINGS_THEME_TYPE
            ):
                pass
            case Channel.CONNECT:
                self.auth_events.put_nowait(message.payload)
            case None:
                logger.warning("Unhandled channel: %s", message.channel)

    def _apply(self, channel: Channel, payload: object) -> None:
        """Apply a tracked update and fire whichever readiness signals it completes."""
        if channel is Channel.API_VERSION and not self._gate.first_seen.is_set():
            logger.info("Player API version: %s", payload)
            self._gate.first_seen.set()
        try:
            self._cache.apply(channel, payload)
        except ValidationError:
            logger.warning("Dropped %s update with unexpected payload: %r", channel, payload)
            return
        if self._gate.update(self._cache.populated):
            logger.info("Player state initialized")
