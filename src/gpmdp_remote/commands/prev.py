"""Go back to the previous track."""

import typer

from gpmdp_remote.app_context import use_context


def prev(ctx: typer.Context) -> None:
    """Return to the previous song."""
    app = use_context(ctx)
    app.run(lambda client: client.prev())
    app.out.print_done("prev")
