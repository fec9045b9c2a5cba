"""Errors raised by the player client core."""


class RemoteError(Exception):
    """Application-level error raised by player client operations."""

    code = "remote"

    def __init__(self, message: str) -> None:
        """Initialize with a human-readable message; the machine-readable code comes from the class.

        Args:
            message: Human-readable error description.

        """
        super().__init__(message)


class PlayerConnectionError(RemoteError):
    """The websocket connection to the player could not be established."""

    code = "connection_failed"


class TransportError(RemoteError):
    """Read or write failure on an established connection. Fatal for the process."""

    code = "transport"


class EncodingError(RemoteError):
    """An outbound request could not be serialized to JSON."""

    code = "encoding"


class InvalidPinError(RemoteError):
    """The player rejected the PIN entered during interactive auth."""

    code = "invalid_pin"


class UnexpectedAuthResponseError(RemoteError):
    """The player answered the PIN step with something other than a credential string."""

    code = "unexpected_auth_response"


class NotInitializedError(RemoteError):
    """Player state was requested before every tracked channel had been seen."""

    code = "not_initialized"


class CallInProgressError(RemoteError):
    """A playback command was issued while another one is still awaiting its result."""

    code = "call_in_progress"
