"""Toggle shuffle mode."""

import typer

from gpmdp_remote.app_context import use_context


def toggle_shuffle(ctx: typer.Context) -> None:
    """Toggle shuffle mode."""
    app = use_context(ctx)
    app.run(lambda client: client.toggle_shuffle())
    app.out.print_done("toggleshuffle")
