"""Application context shared across CLI commands."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import typer

from gpmdp_remote.config import Config
from gpmdp_remote.output import Output
from gpmdp_remote.remote import PlayerClient, RemoteError, TransportError, open_client

# Exit code when the connection drops mid-command
TRANSPORT_EXIT_CODE = 2

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared application state passed through Typer context."""

    out: Output
    cfg: Config

    def run(self, action: Callable[[PlayerClient], Awaitable[T]], *, use_stored_credential: bool = True) -> T:
        """Connect to the player, run one action against it, and disconnect.

        Any RemoteError is printed and turned into a non-zero exit.
        """

        async def session() -> T:
            async with open_client(self.cfg.url, client_name=self.cfg.client_name, credential=self.cfg.auth_key) as client:
                if use_stored_credential and client.has_stored_credential:
                    await client.authenticate_with_stored_credential()
                return await action(client)

        try:
            return asyncio.run(session())
        except TransportError as e:
            self.out.print_error_and_exit(e.code, str(e), exit_code=TRANSPORT_EXIT_CODE)
        except RemoteError as e:
            self.out.print_error_and_exit(e.code, str(e))


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result
