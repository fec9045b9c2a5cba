"""Remote subsystem: websocket transport, message router, state cache, and player client."""

from gpmdp_remote.remote.client import PlayerClient as PlayerClient
from gpmdp_remote.remote.client import open_client as open_client
from gpmdp_remote.remote.errors import RemoteError as RemoteError
from gpmdp_remote.remote.errors import TransportError as TransportError
from gpmdp_remote.remote.state import PlayerState as PlayerState
