"""
WebSocket feeds over the in-process change feed.

Every endpoint authenticates with ?token=<Firebase ID token>, subscribes to
one channel and forwards its events as JSON. Location feeds first send the
latest stored row as a snapshot. Clients may send "ping" to keep the
connection alive.

Database work (auth, access checks, snapshot) runs once in the threadpool on
a short-lived session; nothing holds a connection while a socket is open.
"""

import asyncio
import logging
from typing import Optional, Dict, Any, Tuple

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.core.auth import SessionContext, resolve_token_session
from app.core.realtime import feed, channel_for, Subscription
from app.db import SessionLocal
from app.domains.notifications.service.notification_service import NOTIFICATIONS_CHANNEL
from app.domains.requests.service.walk_request_service import WALK_REQUESTS_TABLE
from app.domains.tracking.repository.location_repository import LocationRepository
from app.domains.tracking.service.tracking_service import (
    TrackingService,
    ADMIN_LOCATIONS_TABLE,
    admin_location_to_dict,
)
from app.domains.walks.repository.walk_repository import WalkRepository
from app.domains.walks.service.walk_service import LOCATIONS_TABLE, location_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ws", tags=["WebSocket"])

CLOSE_UNAUTHENTICATED = 4001
CLOSE_FORBIDDEN = 4003

Opened = Tuple[Subscription, Optional[Dict[str, Any]]]


class FeedRejected(Exception):
    def __init__(self, code: int, reason: str):
        super().__init__(reason)
        self.code = code
        self.reason = reason


def _authenticate(db: Session, token: Optional[str]) -> SessionContext:
    session = resolve_token_session(db, token)
    if session is None:
        raise FeedRejected(CLOSE_UNAUTHENTICATED, "Authentication required")
    return session


def _subscribe_with_snapshot(channel: str, loop: asyncio.AbstractEventLoop, read_snapshot) -> Opened:
    # subscribe before reading the snapshot so no update falls in between
    sub = feed.subscribe(channel, loop=loop)
    try:
        return sub, read_snapshot()
    except Exception:
        feed.unsubscribe(sub)
        raise


def _open_walker_location(db: Session, loop, token: Optional[str], walker_id: str) -> Opened:
    session = _authenticate(db, token)
    if not TrackingService(db).can_view_walker(session, walker_id):
        raise FeedRejected(CLOSE_FORBIDDEN, "Not affiliated")

    return _subscribe_with_snapshot(
        channel_for(ADMIN_LOCATIONS_TABLE, walker_id),
        loop,
        lambda: admin_location_to_dict(LocationRepository(db).get_active_admin_location(walker_id)),
    )


def _open_walk_locations(db: Session, loop, token: Optional[str], walk_id: str) -> Opened:
    session = _authenticate(db, token)
    walk = WalkRepository(db).get(walk_id)
    if walk is None or session.user_id not in (walk.client_id, walk.walker_id):
        raise FeedRejected(CLOSE_FORBIDDEN, "Not a participant")

    def latest_point():
        points = LocationRepository(db).list_locations(walk_id)
        return location_to_dict(points[0]) if points else None

    return _subscribe_with_snapshot(channel_for(LOCATIONS_TABLE, walk_id), loop, latest_point)


def _open_walk_requests(db: Session, loop, token: Optional[str]) -> Opened:
    session = _authenticate(db, token)
    if not session.is_walker:
        raise FeedRejected(CLOSE_FORBIDDEN, "Walkers only")
    return feed.subscribe(channel_for(WALK_REQUESTS_TABLE, session.user_id), loop=loop), None


def _open_notifications(db: Session, loop, token: Optional[str]) -> Opened:
    session = _authenticate(db, token)
    return feed.subscribe(channel_for(NOTIFICATIONS_CHANNEL, session.user_id), loop=loop), None


def _run_with_session(opener, *args) -> Opened:
    db = SessionLocal()
    try:
        return opener(db, *args)
    finally:
        db.close()


async def _open(websocket: WebSocket, opener, *args) -> Optional[Opened]:
    """Run the opener in the threadpool; close the socket if it is rejected."""
    loop = asyncio.get_running_loop()
    try:
        return await run_in_threadpool(_run_with_session, opener, loop, *args)
    except FeedRejected as e:
        await websocket.close(code=e.code, reason=e.reason)
        return None


async def _stream(websocket: WebSocket, sub: Subscription, snapshot: Optional[Dict[str, Any]] = None, send_snapshot: bool = False):
    """Accept, send the snapshot, then forward events until either side stops."""

    async def forward():
        while True:
            event = await sub.get()
            await websocket.send_json(event)

    async def receive():
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")

    tasks = []
    try:
        await websocket.accept()
        if send_snapshot:
            await websocket.send_json({
                "event": "SNAPSHOT",
                "table": sub.channel.split(":", 1)[0],
                "channel": sub.channel,
                "new": jsonable_encoder(snapshot),
            })

        tasks = [asyncio.create_task(forward()), asyncio.create_task(receive())]
        done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)

        for task in done:
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.warning("[REALTIME] %s: stream closed after error: %r", sub.channel, exc)
    except WebSocketDisconnect:
        pass
    finally:
        feed.unsubscribe(sub)
        for task in tasks:
            task.cancel()
        # exceptions of finished tasks were logged above
        await asyncio.gather(*tasks, return_exceptions=True)
        if sub.dropped:
            logger.info("[REALTIME] %s: %d events dropped for a slow client", sub.channel, sub.dropped)


@router.websocket("/walkers/{walker_id}/location")
async def walker_location_feed(
    websocket: WebSocket,
    walker_id: str,
    token: Optional[str] = Query(None),
):
    """Live position of one walker, for the walker and their affiliated clients."""
    opened = await _open(websocket, _open_walker_location, token, walker_id)
    if opened is None:
        return
    sub, snapshot = opened
    await _stream(websocket, sub, snapshot, send_snapshot=True)


@router.websocket("/walks/{walk_id}/locations")
async def walk_locations_feed(
    websocket: WebSocket,
    walk_id: str,
    token: Optional[str] = Query(None),
):
    opened = await _open(websocket, _open_walk_locations, token, walk_id)
    if opened is None:
        return
    sub, snapshot = opened
    await _stream(websocket, sub, snapshot, send_snapshot=True)


@router.websocket("/requests")
async def walk_requests_feed(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
):
    """New walk requests addressed to the authenticated walker."""
    opened = await _open(websocket, _open_walk_requests, token)
    if opened is None:
        return
    await _stream(websocket, opened[0])


@router.websocket("/notifications")
async def notifications_feed(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
):
    opened = await _open(websocket, _open_notifications, token)
    if opened is None:
        return
    await _stream(websocket, opened[0])
