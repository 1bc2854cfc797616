"""
Tests for the in-process change feed and the realtime socket.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from fleet_backend.app.main import app
from fleet_backend.app.api.v1.endpoints.realtime import parse_tables, stop_forwarding
from fleet_backend.app.services.changefeed import ChangeFeed, ChangeType


@pytest.mark.asyncio
async def test_subscribers_get_matching_events():
    feed = ChangeFeed()
    vehicles_only = feed.subscribe(["vehicles"])
    everything = feed.subscribe()

    assert feed.notify("trips", ChangeType.INSERT, 1) == 1
    assert feed.notify("vehicles", ChangeType.UPDATE, 2) == 2

    event = await vehicles_only.get()
    assert (event.table, event.event, event.id) == ("vehicles", ChangeType.UPDATE, 2)
    assert [(await everything.get()).table for _ in range(2)] == ["trips", "vehicles"]


@pytest.mark.asyncio
async def test_close_ends_iteration_and_unsubscribes():
    feed = ChangeFeed()
    subscription = feed.subscribe(["drivers"])
    feed.notify("drivers", ChangeType.DELETE, 3)
    subscription.close()

    assert feed.subscriber_count == 0
    assert [e.id async for e in subscription] == [3]
    assert feed.notify("drivers", ChangeType.DELETE, 4) == 0


@pytest.mark.asyncio
async def test_slow_subscriber_drops_oldest():
    feed = ChangeFeed(queue_size=3)
    subscription = feed.subscribe()
    for row_id in range(5):
        feed.notify("fuel_logs", ChangeType.INSERT, row_id)

    assert subscription.dropped == 2
    assert [(await subscription.get()).id for _ in range(3)] == [2, 3, 4]


def test_parse_tables():
    assert parse_tables(None) is None
    assert parse_tables(" , ") is None
    assert parse_tables("vehicles, trips") == ["vehicles", "trips"]


def test_realtime_requires_token():
    client = TestClient(app)
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/v1/realtime?tables=vehicles") as websocket:
            websocket.receive_text()


@pytest.mark.asyncio
async def test_stop_forwarding_cancels_running_sender():
    sender = asyncio.create_task(asyncio.sleep(60))
    await stop_forwarding(sender)
    assert sender.cancelled()


@pytest.mark.asyncio
async def test_stop_forwarding_collects_failed_send():
    async def send_on_closed_socket():
        raise RuntimeError("Cannot call send once a close message has been sent")

    sender = asyncio.create_task(send_on_closed_socket())
    await asyncio.sleep(0)
    assert sender.done()

    await stop_forwarding(sender)
    assert isinstance(sender.exception(), RuntimeError)
