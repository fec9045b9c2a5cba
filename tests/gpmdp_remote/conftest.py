"""Shared fixtures: a scripted in-memory connection to stand in for the player."""

import asyncio

import pytest

from gpmdp_remote.remote.errors import TransportError
from gpmdp_remote.remote.protocol import InboundMessage, OutboundRequest

_CLOSED = object()


class FakeConnection:
    """Connection whose inbound frames are pushed by the test and whose sent requests are recorded."""

    def __init__(self) -> None:
        self.sent: list[OutboundRequest] = []
        self.closed = False
        self._inbox: asyncio.Queue[object] = asyncio.Queue()

    def push(self, **fields: object) -> None:
        """Queue one inbound frame."""
        self._inbox.put_nowait(InboundMessage(**fields))  # type: ignore[arg-type]

    def push_state(self, channel: str, payload: object) -> None:
        """Queue one state update."""
        self.push(channel=channel, payload=payload)

    def push_result(self) -> None:
        """Queue one call result."""
        self.push(namespace="result", type="return", value=None, request_id=0)

    def drop(self) -> None:
        """Make the next receive fail as if the socket closed."""
        self._inbox.put_nowait(_CLOSED)

    async def drain(self) -> None:
        """Wait until the router has consumed and dispatched every queued frame."""
        await self._inbox.join()

    async def send(self, req: OutboundRequest) -> None:
        self.sent.append(req)

    async def receive(self) -> InboundMessage:
        item = await self._inbox.get()
        self._inbox.task_done()
        if item is _CLOSED:
            raise TransportError("Connection closed by peer.")
        assert isinstance(item, InboundMessage)
        return item

    async def close(self) -> None:
        self.closed = True


# One valid payload per tracked channel
WARM_UPDATES: dict[str, object] = {
    "API_VERSION": "1.1.0",
    "playState": True,
    "volume": 80,
    "shuffle": "NO_SHUFFLE",
    "repeat": "LIST_REPEAT",
    "track": {"title": "Song", "artist": "Artist", "album": "Album", "albumArt": "http://art"},
    "rating": {"liked": True, "disliked": False},
    "time": {"current": 61_000, "total": 185_000},
}


@pytest.fixture
def conn() -> FakeConnection:
    """Fresh scripted connection."""
    return FakeConnection()


@pytest.fixture
def warm_updates() -> dict[str, object]:
    """One valid state update per tracked channel."""
    return dict(WARM_UPDATES)
