"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201  # output layer: print() is how CLI output is produced

import json
import sys
from typing import NoReturn

import typer

from gpmdp_remote.config import AUTH_KEY_ENV
from gpmdp_remote.remote import PlayerState


def format_ms(ms: int) -> str:
    """Format a millisecond duration as m:ss, or h:mm:ss past an hour."""
    minutes, seconds = divmod(max(ms, 0) // 1000, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, object], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}))
        else:
            print(message)

    def print_error_and_exit(self, code: str, message: str, *, exit_code: int = 1) -> NoReturn:
        """Print an error in JSON or human-readable format and exit.

        Raises:
            typer.Exit: Always, with the given exit code.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
            print("Run 'gpmdp-remote --help' for usage.", file=sys.stderr)
        raise typer.Exit(code=exit_code)

    # --- Auth ---

    def print_auth_key(self, key: str) -> None:
        """Print the credential issued by interactive auth, as an env assignment."""
        self._success({"auth_key": key}, f"{AUTH_KEY_ENV}={key}")

    # --- Playback ---

    def print_done(self, action: str) -> None:
        """Print playback command confirmation."""
        self._success({"action": action}, f"{action}: ok")

    def print_status(self, state: PlayerState) -> None:
        """Print the current track, or that playback is paused."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": state.model_dump()}))
            return
        if not state.play_state:
            print("Playback paused")
            return
        track = state.track
        print("Currently playing:")
        print(f"\tTrack: {track.title or ''}")
        print(f"\tArtist: {track.artist or ''}")
        print(f"\tAlbum: {track.album or ''}")
        print(f"\tTime: {format_ms(state.time.current)} / {format_ms(state.time.total)}")
