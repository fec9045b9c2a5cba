"""CLI entry point for gpmdp-remote."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus
from pydantic import ValidationError

from gpmdp_remote.app_context import AppContext
from gpmdp_remote.commands.auth import auth
from gpmdp_remote.commands.next import next_
from gpmdp_remote.commands.pause import pause
from gpmdp_remote.commands.play import play
from gpmdp_remote.commands.prev import prev
from gpmdp_remote.commands.status import status
from gpmdp_remote.commands.toggle_repeat import toggle_repeat
from gpmdp_remote.commands.toggle_shuffle import toggle_shuffle
from gpmdp_remote.config import Config
from gpmdp_remote.log import setup_logging
from gpmdp_remote.output import Output

app = TyperPlus(package_name="gpmdp-remote")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    url: Annotated[str | None, typer.Option("--url", help="Websocket endpoint of the player.")] = None,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path.")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log outgoing frames at DEBUG level.")] = False,
) -> None:
    """Control Google Play Music Desktop Player from the terminal."""
    out = Output(json_mode=json_output)
    try:
        cfg = Config.build(data_dir, url, verbose=verbose)
    except ValidationError as e:
        out.print_error_and_exit("invalid_config", str(e))
    cfg.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(cfg.log_path, cfg.log_level)
    ctx.obj = AppContext(out=out, cfg=cfg)


# Setup
app.command()(auth)

# Playback
app.command()(play)
app.command()(pause)
app.command("next", aliases=["n"])(next_)
app.command(aliases=["p"])(prev)
app.command("toggleshuffle")(toggle_shuffle)
app.command("togglerepeat")(toggle_repeat)

# State
app.command(aliases=["s"])(status)
