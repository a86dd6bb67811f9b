"""
Tests for notification sinks, the subscription hub and the WebSocket endpoint
"""
import asyncio
import threading

import pytest
from starlette.websockets import WebSocketDisconnect

from shiftdesk.core.deps import get_notification_hub, get_notification_sink
from shiftdesk.main import app
from shiftdesk.services.notifications import (
    CompositeNotificationSink,
    HubNotificationSink,
    NotificationHub,
    RoutedNotificationSink,
    employee_room,
)


class ExplodingSink:
    def on_new_leave(self, leave):
        raise RuntimeError("transport down")


class CountingSink:
    def __init__(self):
        self.calls = 0

    def on_new_leave(self, leave):
        self.calls += 1


def test_hub_routes_by_room():
    async def scenario():
        hub = NotificationHub(queue_size=10)
        admin = hub.subscribe(["admin"])
        employee = hub.subscribe([employee_room(7)])

        assert hub.publish(["admin"], {"event": "newLeave"}) == 1
        assert hub.publish(["admin", employee_room(7)], {"event": "leaveStatusChanged"}) == 2

        assert admin.queue.qsize() == 2
        assert (await employee.next_message())["event"] == "leaveStatusChanged"

        hub.unsubscribe(admin)
        assert hub.subscriber_count("admin") == 0
        assert hub.publish(["admin"], {"event": "newLeave"}) == 0

    asyncio.run(scenario())


def test_full_queue_drops_events():
    async def scenario():
        hub = NotificationHub(queue_size=1)
        subscription = hub.subscribe(["admin"])
        hub.publish(["admin"], {"event": "first"})
        hub.publish(["admin"], {"event": "second"})

        assert subscription.queue.qsize() == 1
        assert (await subscription.next_message())["event"] == "first"

    asyncio.run(scenario())


def test_publish_from_worker_thread():
    async def scenario():
        hub = NotificationHub(queue_size=10)
        subscription = hub.subscribe(["admin"])
        worker = threading.Thread(target=hub.publish, args=(["admin"], {"event": "attendanceMarked"}))
        worker.start()
        worker.join()
        message = await asyncio.wait_for(subscription.next_message(), timeout=2)
        assert message["event"] == "attendanceMarked"

    asyncio.run(scenario())


def test_composite_sink_isolates_failures():
    counting = CountingSink()
    composite = CompositeNotificationSink(ExplodingSink(), counting)
    composite.on_new_leave(object())
    assert counting.calls == 1


def test_websocket_requires_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/api/v1/notifications/ws") as websocket:
            websocket.receive_json()


def test_websocket_rejects_bad_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/api/v1/notifications/ws?token=not-a-jwt") as websocket:
            websocket.receive_json()


def test_admin_receives_new_leave(client, admin_headers, employee_headers):
    hub = NotificationHub(queue_size=10)
    app.dependency_overrides[get_notification_hub] = lambda: hub
    app.dependency_overrides[get_notification_sink] = lambda: HubNotificationSink(hub)
    token = admin_headers["Authorization"].split(" ", 1)[1]

    with client.websocket_connect(f"/api/v1/notifications/ws?token={token}") as websocket:
        assert websocket.receive_json() == {"event": "connected", "data": {"rooms": ["admin"]}}

        response = client.post(
            "/api/v1/leaves",
            json={"start_date": "2024-03-10", "end_date": "2024-03-10", "reason": "Dentist"},
            headers=employee_headers,
        )
        assert response.status_code == 201

        message = websocket.receive_json()
        assert message["event"] == "newLeave"
        assert message["data"]["id"] == response.json()["id"]
        assert message["data"]["reason"] == "Dentist"


def test_routed_sink_subclass_must_define_emit():
    class SilentSink(RoutedNotificationSink):
        pass

    with pytest.raises(TypeError):
        SilentSink()
