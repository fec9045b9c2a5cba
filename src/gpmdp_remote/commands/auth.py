"""Register this client with the player and print the issued credential."""

import typer

from gpmdp_remote.app_context import use_context


def prompt_pin() -> str:
    """Ask for the PIN the player shows. The prompt goes to stderr so --json stdout stays parseable."""
    pin: str = typer.prompt("Enter a PIN", err=True)
    return pin


def auth(ctx: typer.Context) -> None:
    """Authenticate so this client can control the player (enter the PIN it shows)."""
    app = use_context(ctx)
    key = app.run(lambda client: client.run_interactive_auth(prompt_pin), use_stored_credential=False)
    app.out.print_auth_key(key)
