"""Skip to the next track."""

import typer

from gpmdp_remote.app_context import use_context


def next_(ctx: typer.Context) -> None:
    """Advance to the next song."""
    app = use_context(ctx)
    app.run(lambda client: client.next())
    app.out.print_done("next")
