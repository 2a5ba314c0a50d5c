"""Tests for request-scoped gateway helpers."""

import asyncio
from types import SimpleNamespace

import pytest

from schedule_service.api import dependencies
from schedule_service.api.dependencies import ClientDisconnectedError, run_until_disconnect


class FakeRequest:
    """Just enough of a Starlette request for disconnect polling."""

    def __init__(self, disconnected):
        self.method = "GET"
        self.url = SimpleNamespace(path="/events")
        self.disconnected = disconnected
        self.polls = 0

    async def is_disconnected(self):
        self.polls += 1
        return self.disconnected


@pytest.fixture(autouse=True)
def fast_polling(monkeypatch):
    monkeypatch.setattr(dependencies, "DISCONNECT_POLL_SECONDS", 0.01)


def test_disconnect_cancels_in_flight_call():
    cancelled = []

    async def blocked_store_call():
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    async def scenario():
        request = FakeRequest(disconnected=True)
        with pytest.raises(ClientDisconnectedError) as excinfo:
            await run_until_disconnect(request, blocked_store_call())
        # Let the cancellation reach the task
        await asyncio.sleep(0.05)
        return request, excinfo.value

    request, error = asyncio.run(scenario())

    assert cancelled == [True]
    assert request.polls >= 1
    assert error.status_code == 499


def test_connected_client_gets_result():
    async def slow_call():
        await asyncio.sleep(0.05)
        return ["event"]

    async def scenario():
        request = FakeRequest(disconnected=False)
        return await run_until_disconnect(request, slow_call()), request

    result, request = asyncio.run(scenario())

    assert result == ["event"]
    assert request.polls >= 1


def test_errors_from_the_call_propagate():
    async def failing_call():
        raise ValueError("boom")

    with pytest.raises(ValueError):
        asyncio.run(run_until_disconnect(FakeRequest(disconnected=False), failing_call()))
