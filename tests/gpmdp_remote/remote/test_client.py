"""Tests for the player client: playback commands, status, and auth over a scripted connection."""

import asyncio
import threading

import pytest

from gpmdp_remote.remote.client import PlayerClient
from gpmdp_remote.remote.errors import (
    CallInProgressError,
    InvalidPinError,
    NotInitializedError,
    TransportError,
    UnexpectedAuthResponseError,
)
from gpmdp_remote.remote.protocol import OutboundRequest

CLIENT_NAME = "test-remote"


async def settle() -> None:
    """Give the router and any spawned tasks a few loop iterations."""
    for _ in range(20):
        await asyncio.sleep(0)


def run_with_client(conn, scenario, *, credential: str | None = None):
    """Start a client over the scripted connection, run the scenario, and close the client."""

    async def main():
        client = PlayerClient(conn, client_name=CLIENT_NAME, credential=credential)
        client.start()
        try:
            return await scenario(client)
        finally:
            await client.close()

    return asyncio.run(main())


class TestPlayPauseGuard:
    """pause/play short-circuit on the cached play state."""

    def test_pause_when_paused_sends_nothing(self, conn) -> None:
        """pause() with playState false returns at once without a request."""

        async def scenario(client: PlayerClient) -> None:
            conn.push_state("playState", False)
            await conn.drain()
            await client.pause()

        run_with_client(conn, scenario)
        assert conn.sent == []

    def test_play_when_playing_sends_nothing(self, conn) -> None:
        """play() with playState true returns at once without a request."""

        async def scenario(client: PlayerClient) -> None:
            conn.push_state("playState", True)
            await conn.drain()
            await client.play()

        run_with_client(conn, scenario)
        assert conn.sent == []

    @pytest.mark.parametrize(("playing", "action"), [(True, "pause"), (False, "play")])
    def test_toggle_waits_for_result(self, conn, playing: bool, action: str) -> None:
        """A non-short-circuited pause/play sends one playPause and completes only after a result."""

        async def scenario(client: PlayerClient) -> None:
            conn.push_state("playState", playing)
            await conn.drain()
            task = asyncio.create_task(getattr(client, action)())
            await settle()
            assert len(conn.sent) == 1
            assert not task.done()
            conn.push_state("volume", 10)
            await conn.drain()
            await settle()
            assert not task.done()
            conn.push_result()
            await asyncio.wait_for(task, 1)

        run_with_client(conn, scenario)
        assert conn.sent == [OutboundRequest(namespace="playback", method="playPause", request_id=1)]


class TestUnguardedCommands:
    """Commands that are always sent."""

    @pytest.mark.parametrize(
        ("action", "method"),
        [("toggle_shuffle", "toggleShuffle"), ("toggle_repeat", "toggleRepeat"), ("next", "forward"), ("prev", "rewind")],
    )
    def test_sends_method(self, conn, action: str, method: str) -> None:
        """Each command sends its playback method with no arguments."""

        async def scenario(client: PlayerClient) -> None:
            task = asyncio.create_task(getattr(client, action)())
            await settle()
            conn.push_result()
            await asyncio.wait_for(task, 1)

        run_with_client(conn, scenario)
        assert [(r.namespace, r.method, r.arguments) for r in conn.sent] == [("playback", method, ())]

    def test_concurrent_command_fails_fast(self, conn) -> None:
        """A second command while one is outstanding raises CallInProgressError."""

        async def scenario(client: PlayerClient) -> None:
            first = asyncio.create_task(client.next())
            await settle()
            with pytest.raises(CallInProgressError):
                await client.prev()
            conn.push_result()
            await asyncio.wait_for(first, 1)

        run_with_client(conn, scenario)
        assert [r.method for r in conn.sent] == ["forward"]

    def test_connection_lost_while_waiting(self, conn) -> None:
        """A dropped connection fails the waiting command with TransportError."""

        async def scenario(client: PlayerClient) -> None:
            task = asyncio.create_task(client.next())
            await settle()
            conn.drop()
            with pytest.raises(TransportError, match="closed"):
                await asyncio.wait_for(task, 1)

        run_with_client(conn, scenario)


class TestStatus:
    """status_snapshot and readiness."""

    def test_before_warm(self, conn) -> None:
        """Status before every tracked channel arrived raises NotInitializedError."""

        async def scenario(client: PlayerClient) -> None:
            conn.push_state("API_VERSION", "1.1.0")
            conn.push_state("playState", True)
            await conn.drain()
            await client.wait_until_ready()
            with pytest.raises(NotInitializedError):
                client.status_snapshot()

        run_with_client(conn, scenario)

    def test_after_warm(self, conn, warm_updates) -> None:
        """After warm-up the snapshot reflects the last update per field."""

        async def scenario(client: PlayerClient):
            for channel, payload in warm_updates.items():
                conn.push_state(channel, payload)
            conn.push_state("time", {"current": 62_000, "total": 185_000})
            await client.wait_until_warm()
            await conn.drain()
            return client.status_snapshot()

        state = run_with_client(conn, scenario)
        assert state.api_version == "1.1.0"
        assert state.play_state is True
        assert state.track.title == "Song"
        assert state.rating.liked is True
        assert state.time.current == 62_000
        assert state.volume == 80

    def test_wait_fails_when_connection_drops(self, conn) -> None:
        """Waiting for readiness on a dead connection raises instead of hanging."""

        async def scenario(client: PlayerClient) -> None:
            conn.drop()
            with pytest.raises(TransportError):
                await asyncio.wait_for(client.wait_until_ready(), 1)

        run_with_client(conn, scenario)


class TestAuth:
    """Interactive and stored-credential authentication."""

    def _auth(self, conn, second_event: object) -> object:
        async def scenario(client: PlayerClient):
            conn.push_state("connect", "CODE_REQUIRED")
            conn.push_state("connect", second_event)
            return await asyncio.wait_for(client.run_interactive_auth(lambda: "1234"), 5)

        return run_with_client(conn, scenario)

    def test_returns_token(self, conn) -> None:
        """A string answer to the PIN step is the credential."""
        assert self._auth(conn, "abc123token") == "abc123token"
        assert [r.arguments for r in conn.sent] == [(CLIENT_NAME,), (CLIENT_NAME, "1234")]
        assert {(r.namespace, r.method) for r in conn.sent} == {("connect", "connect")}

    def test_wrong_pin(self, conn) -> None:
        """CODE_REQUIRED after the PIN step means the PIN was wrong."""
        with pytest.raises(InvalidPinError):
            self._auth(conn, "CODE_REQUIRED")

    def test_non_string_answer(self, conn) -> None:
        """A non-string answer is rejected."""
        with pytest.raises(UnexpectedAuthResponseError):
            self._auth(conn, {"token": "abc"})

    def test_pin_step_waits_for_phase_one_event(self, conn) -> None:
        """The PIN is not requested before the player acknowledges phase one."""
        prompted: list[bool] = []

        async def scenario(client: PlayerClient):
            task = asyncio.create_task(client.run_interactive_auth(lambda: prompted.append(True) or "1234"))
            await settle()
            assert prompted == []
            assert len(conn.sent) == 1
            conn.push_state("connect", "CODE_REQUIRED")
            conn.push_state("connect", "token")
            return await asyncio.wait_for(task, 5)

        assert run_with_client(conn, scenario) == "token"
        assert prompted == [True]

    def test_connection_lost_during_pin_prompt(self, conn) -> None:
        """A dropped connection fails the handshake while the operator is still typing."""
        typing = threading.Event()
        release = threading.Event()

        def slow_prompt() -> str:
            typing.set()
            release.wait(5)
            return "1234"

        async def scenario(client: PlayerClient) -> None:
            conn.push_state("connect", "CODE_REQUIRED")
            task = asyncio.create_task(client.run_interactive_auth(slow_prompt))
            while not typing.is_set():
                await asyncio.sleep(0.01)
            conn.drop()
            with pytest.raises(TransportError):
                await asyncio.wait_for(task, 1)

        try:
            run_with_client(conn, scenario)
        finally:
            release.set()
        assert len(conn.sent) == 1

    def test_stored_credential(self, conn) -> None:
        """A stored credential is re-asserted once without waiting for an answer."""

        async def scenario(client: PlayerClient) -> None:
            assert client.has_stored_credential
            await asyncio.wait_for(client.authenticate_with_stored_credential(), 1)

        run_with_client(conn, scenario, credential="saved-key")
        assert len(conn.sent) == 1
        assert conn.sent[0].arguments == (CLIENT_NAME, "saved-key")

    def test_no_stored_credential(self, conn) -> None:
        """Without a stored credential nothing is sent."""

        async def scenario(client: PlayerClient) -> None:
            assert not client.has_stored_credential
            await client.authenticate_with_stored_credential()

        run_with_client(conn, scenario)
        assert conn.sent == []
