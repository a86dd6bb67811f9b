"""
Live notification WebSocket

Clients connect to /notifications/ws?token=<jwt>. Admins receive events for
the "admin" room, employees for their own "employee_<id>" room. Each message
is {"event": <name>, "data": <payload>}.
"""
import asyncio
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect, status
from sqlalchemy.orm import Session
from shiftdesk.core.deps import employee_from_token, get_db, get_notification_hub
from shiftdesk.services.notifications import ADMIN_ROOM, NotificationHub, employee_room

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/ws")
async def notifications_ws(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    hub: NotificationHub = Depends(get_notification_hub)
):
    try:
        employee = employee_from_token(db, token or "")
    except HTTPException as exc:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=str(exc.detail))
        return

    rooms = [ADMIN_ROOM] if employee.is_admin else [employee_room(employee.id)]
    employee_id = employee.id
    db.close()

    await websocket.accept()
    subscription = hub.subscribe(rooms)
    logger.info("Employee %s subscribed to %s", employee_id, ",".join(rooms))

    async def forward_events():
        while True:
            message = await subscription.next_message()
            await websocket.send_json(message)

    async def read_until_disconnect():
        # Client messages carry no meaning; reading detects the disconnect
        while True:
            await websocket.receive_text()

    sender = asyncio.ensure_future(forward_events())
    receiver = asyncio.ensure_future(read_until_disconnect())
    try:
        await websocket.send_json({"event": "connected", "data": {"rooms": rooms}})
        done, pending = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            error = task.exception()
            if error is not None and not isinstance(error, WebSocketDisconnect):
                raise error
    finally:
        sender.cancel()
        receiver.cancel()
        hub.unsubscribe(subscription)
        logger.info("Employee %s unsubscribed", employee_id)
