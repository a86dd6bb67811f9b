"""
Change notifications for live dashboards.

Write-side services receive a NotificationSink and call one of its on_*
methods after a successful commit. Delivery is fire-and-forget and
at-most-once: nothing in the core depends on an event arriving.

Events are routed to rooms the way the dashboard subscribes: admins listen
on "admin", each employee on "employee_<id>".
"""
import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Protocol, Set

from shiftdesk.utils.json_serializer import to_json_safe

logger = logging.getLogger(__name__)

ADMIN_ROOM = "admin"

NEW_LEAVE = "newLeave"
EMPLOYEE_UPDATED = "employeeUpdated"
ATTENDANCE_MARKED = "attendanceMarked"
LEAVE_STATUS_CHANGED = "leaveStatusChanged"
EMERGENCY_LEAVE_ASSIGNED = "emergencyLeaveAssigned"


def employee_room(employee_id: int) -> str:
    return f"employee_{employee_id}"


class NotificationSink(Protocol):
    def on_new_leave(self, leave) -> None: ...

    def on_employee_updated(self, employee) -> None: ...

    def on_attendance_marked(self, record) -> None: ...

    def on_leave_status_changed(self, leave) -> None: ...

    def on_emergency_leave_assigned(self, leave) -> None: ...


def _leave_payload(leave) -> Dict[str, Any]:
    from shiftdesk.schemas.leave import LeaveOut
    return LeaveOut.model_validate(leave).model_dump(mode="json")


def _employee_payload(employee) -> Dict[str, Any]:
    from shiftdesk.schemas.employee import EmployeeOut
    return EmployeeOut.model_validate(employee).model_dump(mode="json")


def _attendance_payload(record) -> Dict[str, Any]:
    from shiftdesk.schemas.attendance import AttendanceOut
    return AttendanceOut.model_validate(record).model_dump(mode="json")


class RoutedNotificationSink(ABC):
    """
    Maps each on_* call to (event name, rooms, payload) and hands it to emit().
    Subclasses decide what emitting means.
    """

    @abstractmethod
    def emit(self, event: str, rooms: List[str], payload: Dict[str, Any]) -> None:
        ...

    def on_new_leave(self, leave) -> None:
        self.emit(NEW_LEAVE, [ADMIN_ROOM], _leave_payload(leave))

    def on_employee_updated(self, employee) -> None:
        self.emit(EMPLOYEE_UPDATED, [ADMIN_ROOM, employee_room(employee.id)], _employee_payload(employee))

    def on_attendance_marked(self, record) -> None:
        self.emit(ATTENDANCE_MARKED, [ADMIN_ROOM, employee_room(record.employee_id)], _attendance_payload(record))

    def on_leave_status_changed(self, leave) -> None:
        self.emit(LEAVE_STATUS_CHANGED, [ADMIN_ROOM, employee_room(leave.employee_id)], _leave_payload(leave))

    def on_emergency_leave_assigned(self, leave) -> None:
        self.emit(EMERGENCY_LEAVE_ASSIGNED, [ADMIN_ROOM, employee_room(leave.employee_id)], _leave_payload(leave))


class LoggingNotificationSink(RoutedNotificationSink):
    def emit(self, event: str, rooms: List[str], payload: Dict[str, Any]) -> None:
        logger.info("notify %s -> %s (id=%s)", event, ",".join(rooms), payload.get("id"))


class Subscription:
    """One WebSocket client's bounded queue, bound to the loop that created it."""

    def __init__(self, rooms: Iterable[str], maxsize: int):
        self.rooms = frozenset(rooms)
        self.loop = asyncio.get_running_loop()
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)

    def offer(self, message: Dict[str, Any]) -> None:
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning("Dropping %s for slow subscriber", message.get("event"))

    async def next_message(self) -> Dict[str, Any]:
        return await self.queue.get()


class NotificationHub:
    """In-process room registry fanning messages out to subscriptions."""

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._rooms: Dict[str, Set[Subscription]] = defaultdict(set)
        self._lock = threading.Lock()

    def subscribe(self, rooms: Iterable[str]) -> Subscription:
        """Must be called from a running event loop."""
        subscription = Subscription(rooms, self.queue_size)
        with self._lock:
            for room in subscription.rooms:
                self._rooms[room].add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            for room in subscription.rooms:
                members = self._rooms.get(room)
                if members is None:
                    continue
                members.discard(subscription)
                if not members:
                    del self._rooms[room]

    def subscriber_count(self, room: str) -> int:
        with self._lock:
            return len(self._rooms.get(room, ()))

    def publish(self, rooms: Iterable[str], message: Dict[str, Any]) -> int:
        """
        Queue `message` once for every subscription in any of `rooms`.

        Safe to call from worker threads. Returns the number of subscriptions
        the message was handed to.
        """
        with self._lock:
            targets = set()
            for room in rooms:
                targets.update(self._rooms.get(room, ()))

        try:
            current_loop: Optional[asyncio.AbstractEventLoop] = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        delivered = 0
        for subscription in targets:
            if subscription.loop is current_loop:
                subscription.offer(message)
            else:
                try:
                    subscription.loop.call_soon_threadsafe(subscription.offer, message)
                except RuntimeError:
                    # Subscriber's loop already closed
                    continue
            delivered += 1
        return delivered


class HubNotificationSink(RoutedNotificationSink):
    def __init__(self, hub: NotificationHub):
        self.hub = hub

    def emit(self, event: str, rooms: List[str], payload: Dict[str, Any]) -> None:
        self.hub.publish(rooms, {"event": event, "data": to_json_safe(payload)})


class CompositeNotificationSink:
    """Forwards every event to each child sink; one failing sink does not stop the others."""

    def __init__(self, *sinks: NotificationSink):
        self.sinks = list(sinks)

    def _forward(self, method: str, obj) -> None:
        for sink in self.sinks:
            try:
                getattr(sink, method)(obj)
            except Exception:
                logger.exception("Notification sink %s failed on %s", type(sink).__name__, method)

    def on_new_leave(self, leave) -> None:
        self._forward("on_new_leave", leave)

    def on_employee_updated(self, employee) -> None:
        self._forward("on_employee_updated", employee)

    def on_attendance_marked(self, record) -> None:
        self._forward("on_attendance_marked", record)

    def on_leave_status_changed(self, leave) -> None:
        self._forward("on_leave_status_changed", leave)

    def on_emergency_leave_assigned(self, leave) -> None:
        self._forward("on_emergency_leave_assigned", leave)


def _build_default_hub() -> NotificationHub:
    from shiftdesk.core.config import settings
    return NotificationHub(queue_size=settings.NOTIFICATION_QUEUE_SIZE)


hub = _build_default_hub()
default_sink = CompositeNotificationSink(LoggingNotificationSink(), HubNotificationSink(hub))
