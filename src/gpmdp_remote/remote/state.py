"""Locally cached snapshot of the player's state, and the readiness gate over it."""

import asyncio
import threading
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter

from gpmdp_remote.remote.errors import NotInitializedError
from gpmdp_remote.remote.protocol import TRACKED_CHANNELS, Channel


class Rating(BaseModel):
    """Thumbs up/down of the current track."""

    model_config = ConfigDict(frozen=True)

    liked: bool = False
    disliked: bool = False


class TrackTime(BaseModel):
    """Playback position, in milliseconds."""

    model_config = ConfigDict(frozen=True)

    current: int = 0
    total: int = 0


class Track(BaseModel):
    """Current track metadata. Fields are None when nothing is loaded."""

    model_config = ConfigDict(frozen=True)

    album: str | None = None
    artist: str | None = None
    title: str | None = None


class PlayerState(BaseModel):
    """Immutable snapshot of the player. Each field group is replaced wholesale on update."""

    model_config = ConfigDict(frozen=True)

    api_version: str = ""
    play_state: bool = False
    rating: Rating = Rating()
    repeat: str = ""
    shuffle: str = ""
    time: TrackTime = TrackTime()
    track: Track = Track()
    volume: int = 0


# Tracked channel -> (PlayerState field, payload validator)
_FIELDS: dict[Channel, tuple[str, TypeAdapter[Any]]] = {
    Channel.API_VERSION: ("api_version", TypeAdapter(str)),
    Channel.PLAY_STATE: ("play_state", TypeAdapter(bool)),
    Channel.RATING: ("rating", TypeAdapter(Rating)),
    Channel.REPEAT: ("repeat", TypeAdapter(str)),
    Channel.SHUFFLE: ("shuffle", TypeAdapter(str)),
    Channel.TIME: ("time", TypeAdapter(TrackTime)),
    Channel.TRACK: ("track", TypeAdapter(Track)),
    Channel.VOLUME: ("volume", TypeAdapter(int)),
}


class StateCache:
    """Player state written by the router and read by command handlers.

    Writes and snapshot reads are serialized by a lock; readers only ever see a whole PlayerState.
    """

    def __init__(self) -> None:
        """Initialize an empty cache with nothing populated."""
        self._lock = threading.Lock()
        self._state = PlayerState()
        self._populated: set[Channel] = set()

    def apply(self, channel: Channel, payload: object) -> None:
        """Replace the field group of a tracked channel with a decoded payload.

        Raises:
            KeyError: The channel is not a tracked channel.
            pydantic.ValidationError: The payload does not fit the field group.

        """
        field_name, adapter = _FIELDS[channel]
        value = adapter.validate_python(payload)
        with self._lock:
            self._state = self._state.model_copy(update={field_name: value})
            self._populated.add(channel)

    def snapshot(self) -> PlayerState:
        """Return the current state. The result is immutable and never changes afterwards."""
        with self._lock:
            return self._state

    @property
    def populated(self) -> frozenset[Channel]:
        """Channels that have been applied at least once."""
        with self._lock:
            return frozenset(self._populated)


class ReadinessGate:
    """One-shot signals telling the command path when the cache can be trusted.

    ``first_seen`` fires on the first API_VERSION update: the stream is alive.
    ``warm`` fires once every tracked channel has been populated.
    """

    def __init__(self, required: frozenset[Channel] = TRACKED_CHANNELS) -> None:
        """Initialize an unfired gate.

        Args:
            required: Channels that must all be populated before ``warm`` fires.

        """
        self._required = required
        self.first_seen = asyncio.Event()
        self.warm = asyncio.Event()

    @property
    def is_warm(self) -> bool:
        """Whether ``warm`` has fired."""
        return self.warm.is_set()

    def update(self, populated: frozenset[Channel]) -> bool:
        """Fire ``warm`` if the populated set now covers every required channel.

        Returns True only on the call that fired it.
        """
        if self.warm.is_set() or not self._required <= populated:
            return False
        self.warm.set()
        return True

    def require_warm(self) -> None:
        """Raise unless ``warm`` has fired.

        Raises:
            NotInitializedError: Some tracked channels have not been seen yet.

        """
        if not self.warm.is_set():
            raise NotInitializedError("Player state was never initialized.")
