"""Resume playback."""

import typer

from gpmdp_remote.app_context import use_context
from gpmdp_remote.remote import PlayerClient


async def _play(client: PlayerClient) -> None:
    await client.wait_until_warm()
    await client.play()


def play(ctx: typer.Context) -> None:
    """Resume playback."""
    app = use_context(ctx)
    app.run(_play)
    app.out.print_done("play")
