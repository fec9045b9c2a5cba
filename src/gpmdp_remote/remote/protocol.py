"""Wire format of the player's JSON-over-websocket control API.

Every frame is one JSON object in a text message. The wire carries no
discriminant field; the shape is inferred from which keys are present.

Request:      {"namespace": "playback", "method": "playPause", "arguments": [], "requestID": 2}
State update: {"channel": "playState", "payload": true}
Call result:  {"namespace": "result", "type": "return", "value": null, "requestID": 2}
"""

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Self

from gpmdp_remote.remote.errors import EncodingError

RESULT_NAMESPACE = "result"


class Channel(StrEnum):
    """Channel names the player publishes state updates on."""

    API_VERSION = "API_VERSION"
    PLAY_STATE = "playState"
    VOLUME = "volume"
    SHUFFLE = "shuffle"
    REPEAT = "repeat"
    TRACK = "track"
    RATING = "rating"
    TIME = "time"
    CONNECT = "connect"
    LIBRARY = "library"
    LYRICS = "lyrics"
    PLAYLISTS = "playlists"
    QUEUE = "queue"
    SEARCH_RESULTS = "search-results"
    SETTINGS_THEME = "settings:theme"
    SETTINGS_THEME_COLOR = "settings:themeColor"
    SETTINGS_THEME_TYPE = "settings:themeType"

    @classmethod
    def parse(cls, name: str | None) -> Self | None:
        """Return the channel for a wire name, or None if the name is not recognized."""
        if name is None:
            return None
        try:
            return cls(name)
        except ValueError:
            return None


# Channels whose payload populates a PlayerState field group
TRACKED_CHANNELS = frozenset(
    {
        Channel.API_VERSION,
        Channel.PLAY_STATE,
        Channel.VOLUME,
        Channel.SHUFFLE,
        Channel.REPEAT,
        Channel.TRACK,
        Channel.RATING,
        Channel.TIME,
    }
)


@dataclass(frozen=True)
class OutboundRequest:
    """Method call sent to the player."""

    namespace: str
    method: str
    arguments: tuple[object, ...] = field(default_factory=tuple)
    request_id: int = 0


@dataclass(frozen=True)
class InboundMessage:
    """One decoded frame from the player: a state update, a call result, or both shapes at once."""

    channel: str | None = None
    payload: object = None
    namespace: str | None = None
    type: str | None = None
    value: object = None
    request_id: int | None = None

    @property
    def is_result(self) -> bool:
        """Whether this frame completes a method call."""
        return self.namespace == RESULT_NAMESPACE


def encode_request(req: OutboundRequest) -> str:
    """Serialize an OutboundRequest to a JSON text frame.

    Raises:
        EncodingError: An argument is not JSON serializable.

    """
    obj = {"namespace": req.namespace, "method": req.method, "arguments": list(req.arguments), "requestID": req.request_id}
    try:
        return json.dumps(obj, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Cannot encode {req.namespace}.{req.method} request: {e}") from e


def decode_message(data: str) -> InboundMessage:
    """Deserialize a JSON text frame into an InboundMessage.

    Raises:
        ValueError: The frame is not valid JSON or not a JSON object.

    """
    obj = json.loads(data)
    if not isinstance(obj, dict):
        msg = f"Expected a JSON object, got {type(obj).__name__}"
        raise ValueError(msg)
    request_id = obj.get("requestID")
    return InboundMessage(
        channel=obj.get("channel"),
        payload=obj.get("payload"),
        namespace=obj.get("namespace"),
        type=obj.get("type"),
        value=obj.get("value"),
        request_id=request_id if isinstance(request_id, int) else None,
    )
