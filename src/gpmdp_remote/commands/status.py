"""Show the currently playing track."""

import typer

from gpmdp_remote.app_context import use_context
from gpmdp_remote.remote import PlayerClient, PlayerState


async def _status(client: PlayerClient) -> PlayerState:
    await client.wait_until_warm()
    return client.status_snapshot()


def status(ctx: typer.Context) -> None:
    """Show the currently playing track."""
    app = use_context(ctx)
    app.out.print_status(app.run(_status))
