"""Websocket transport: the single duplex connection to the player."""

import logging
from typing import Protocol, Self

import websockets
from websockets.asyncio.client import ClientConnection

from gpmdp_remote.remote.errors import PlayerConnectionError, TransportError
from gpmdp_remote.remote.protocol import InboundMessage, OutboundRequest, decode_message, encode_request

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """What the router and the command path need from a connection."""

    async def send(self, req: OutboundRequest) -> None: ...

    async def receive(self) -> InboundMessage: ...

    async def close(self) -> None: ...


class Transport:
    """JSON frames over one websocket connection. No reconnection: any failure is final."""

    def __init__(self, ws: ClientConnection, url: str) -> None:
        """Wrap an established websocket connection.

        Args:
            ws: Open client connection.
            url: Endpoint the connection was opened to, for messages.

        """
        self._ws = ws
        self._url = url

    @classmethod
    async def connect(cls, url: str) -> Self:
        """Open a websocket connection to the player.

        Raises:
            PlayerConnectionError: Endpoint unreachable, invalid, or handshake rejected.

        """
        try:
            ws = await websockets.connect(url, max_size=None)
        except (OSError, TimeoutError, websockets.InvalidURI, websockets.InvalidHandshake) as e:
            raise PlayerConnectionError(f"Couldn't connect to the player at {url}: {e}") from e
        logger.info("Connected to %s", url)
        return cls(ws, url)

    async def send(self, req: OutboundRequest) -> None:
        """Send one request frame.

        Raises:
            EncodingError: The request is not JSON serializable.
            TransportError: The connection is closed.

        """
        frame = encode_request(req)
        logger.debug("Send: %s", frame)
        try:
            await self._ws.send(frame)
        except websockets.ConnectionClosed as e:
            raise TransportError(f"Send {req.namespace}.{req.method} failed: {e}") from e

    async def receive(self) -> InboundMessage:
        """Wait for the next frame and decode it.

        Raises:
            TransportError: The connection closed, the frame is binary, or it is not a JSON object.

        """
        try:
            data = await self._ws.recv()
        except websockets.ConnectionClosed as e:
            raise TransportError(f"Connection to {self._url} closed: {e}") from e
        if isinstance(data, bytes):
            raise TransportError(f"Malformed frame from {self._url}: binary frame")
        try:
            return decode_message(data)
        except ValueError as e:
            raise TransportError(f"Malformed frame from {self._url}: {e}") from e

    async def close(self) -> None:
        """Close the websocket."""
        await self._ws.close()
        logger.info("Closed connection to %s", self._url)
