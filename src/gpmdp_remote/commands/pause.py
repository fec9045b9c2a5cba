"""Pause playback."""

import typer

from gpmdp_remote.app_context import use_context
from gpmdp_remote.remote import PlayerClient


async def _pause(client: PlayerClient) -> None:
    # The play/pause guard reads playState, so the cache must be warm first
    await client.wait_until_warm()
    await client.pause()


def pause(ctx: typer.Context) -> None:
    """Pause playback."""
    app = use_context(ctx)
    app.run(_pause)
    app.out.print_done("pause")
