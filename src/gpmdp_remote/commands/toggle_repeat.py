"""Toggle repeat mode."""

import typer

from gpmdp_remote.app_context import use_context


def toggle_repeat(ctx: typer.Context) -> None:
    """Toggle repeat mode."""
    app = use_context(ctx)
    app.run(lambda client: client.toggle_repeat())
    app.out.print_done("togglerepeat")
