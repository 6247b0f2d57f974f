"""Tests for the Heketi async operation poller."""

from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from glustervol.core.errors import (
    OperationTimeoutError,
    ProtocolViolationError,
    RemoteOperationFailedError,
    TransportError,
)
from glustervol.heketi.poller import AsyncOperationPoller, OperationState


def _resp(status: int, location: str | None = None, **kwargs: Any) -> httpx.Response:
    headers = {"Location": location} if location else {}
    return httpx.Response(
        status,
        headers=headers,
        request=httpx.Request("GET", "http://heketi:8080/"),
        **kwargs,
    )


class ScriptedSend:
    """Records (method, endpoint) calls and replays responses in order."""

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[str, str]] = []

    async def __call__(
        self, method: str, endpoint: str, *, json: Any = None
    ) -> httpx.Response:
        self.calls.append((method, endpoint))
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _poller(send: ScriptedSend, max_polls: int = 10) -> tuple[AsyncOperationPoller, AsyncMock]:
    sleep = AsyncMock()
    return AsyncOperationPoller(send, interval=1.0, max_polls=max_polls, sleep=sleep), sleep


class TestPollerSuccess:
    """Terminal success paths."""

    async def test_redirect_after_pending(self) -> None:
        """200, 200, 303 -> two 1s waits and one GET of the resource."""
        payload = {"id": "abc", "name": "db1"}
        send = ScriptedSend(
            _resp(202, "/queue/A"),
            _resp(200),
            _resp(200),
            _resp(303, "/volumes/B"),
            _resp(200, json=payload),
        )
        poller, sleep = _poller(send)

        result = await poller.run("POST", "/volumes", json={"size": 1})

        assert result.json() == payload
        assert poller.state == OperationState.COMPLETED
        assert sleep.await_count == 2
        sleep.assert_awaited_with(1.0)
        assert send.calls == [
            ("POST", "/volumes"),
            ("GET", "/queue/A"),
            ("GET", "/queue/A"),
            ("GET", "/queue/A"),
            ("GET", "/volumes/B"),
        ]

    async def test_no_content_is_final(self) -> None:
        """204 returns the poll response itself, no further GET."""
        send = ScriptedSend(_resp(202, "/queue/A"), _resp(204))
        poller, sleep = _poller(send)

        result = await poller.run("DELETE", "/volumes/abc")

        assert result.status_code == 204
        assert poller.state == OperationState.COMPLETED
        assert sleep.await_count == 0
        assert send.calls == [("DELETE", "/volumes/abc"), ("GET", "/queue/A")]

    async def test_absolute_location_uses_path(self) -> None:
        send = ScriptedSend(
            _resp(202, "http://heketi:8080/queue/A"),
            _resp(303, "http://heketi:8080/volumes/B"),
            _resp(200, json={}),
        )
        poller, _ = _poller(send)

        await poller.run("POST", "/volumes")

        assert send.calls[1:] == [("GET", "/queue/A"), ("GET", "/volumes/B")]


class TestPollerFailure:
    """Terminal failure paths."""

    @pytest.mark.parametrize("status", [200, 201, 400, 404, 500])
    async def test_bad_submission_status(self, status: int) -> None:
        """Anything but 202 on submission fails with zero polls."""
        send = ScriptedSend(_resp(status, text="nope"))
        poller, _ = _poller(send)

        with pytest.raises(ProtocolViolationError):
            await poller.run("POST", "/volumes")

        assert poller.state == OperationState.FAILED
        assert send.calls == [("POST", "/volumes")]

    async def test_missing_location_on_accept(self) -> None:
        send = ScriptedSend(_resp(202))
        poller, _ = _poller(send)

        with pytest.raises(ProtocolViolationError, match="Location"):
            await poller.run("POST", "/volumes")

        assert len(send.calls) == 1

    async def test_missing_location_on_redirect(self) -> None:
        send = ScriptedSend(_resp(202, "/queue/A"), _resp(303))
        poller, _ = _poller(send)

        with pytest.raises(ProtocolViolationError):
            await poller.run("POST", "/volumes")

    async def test_internal_error_is_remote_failure(self) -> None:
        send = ScriptedSend(
            _resp(202, "/queue/A"), _resp(500, text="brick allocation failed")
        )
        poller, _ = _poller(send)

        with pytest.raises(RemoteOperationFailedError) as exc_info:
            await poller.run("POST", "/volumes")

        assert exc_info.value.status == 500
        assert exc_info.value.body == "brick allocation failed"
        assert poller.state == OperationState.FAILED

    @pytest.mark.parametrize("status", [201, 302, 404, 502])
    async def test_unexpected_poll_status(self, status: int) -> None:
        send = ScriptedSend(_resp(202, "/queue/A"), _resp(status))
        poller, _ = _poller(send)

        with pytest.raises(ProtocolViolationError) as exc_info:
            await poller.run("POST", "/volumes")

        assert not isinstance(exc_info.value, OperationTimeoutError)

    async def test_redirect_target_error(self) -> None:
        send = ScriptedSend(
            _resp(202, "/queue/A"), _resp(303, "/volumes/B"), _resp(404, text="gone")
        )
        poller, _ = _poller(send)

        with pytest.raises(ProtocolViolationError):
            await poller.run("POST", "/volumes")

    async def test_poll_budget_exhausted(self) -> None:
        """Polling stops after max_polls pending answers."""
        send = ScriptedSend(_resp(202, "/queue/A"), *[_resp(200) for _ in range(3)])
        poller, sleep = _poller(send, max_polls=3)

        with pytest.raises(OperationTimeoutError):
            await poller.run("POST", "/volumes")

        assert len(send.calls) == 4
        assert sleep.await_count == 2
        assert poller.state == OperationState.FAILED

    async def test_transport_error_propagates(self) -> None:
        send = ScriptedSend(_resp(202, "/queue/A"), TransportError("connection reset"))
        poller, _ = _poller(send)

        with pytest.raises(TransportError):
            await poller.run("POST", "/volumes")

        assert poller.state == OperationState.FAILED
