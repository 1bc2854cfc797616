"""
Realtime change notifications over WebSocket.

Clients connect with ``?token=<jwt>&tables=vehicles,trips`` and receive one
JSON message per insert, update or delete on those tables. Messages carry
no row data; clients re-fetch.
"""

import asyncio
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status

from fleet_backend.app.core.jwt import decode_access_token
from fleet_backend.app.core.redis_client import get_redis
from fleet_backend.app.core.token_revocation import is_token_revoked
from fleet_backend.app.services.changefeed import ChangeFeed, get_change_feed

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])


async def stop_forwarding(sender: asyncio.Task) -> None:
    """Cancel the sender task and collect its outcome."""
    sender.cancel()
    try:
        await sender
    except asyncio.CancelledError:
        pass
    except Exception as e:
        logger.warning("Realtime send failed: %s", e)


def parse_tables(tables: Optional[str]) -> Optional[List[str]]:
    if not tables:
        return None
    names = [name.strip() for name in tables.split(",") if name.strip()]
    return names or None


@router.websocket("/realtime")
async def realtime(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    tables: Optional[str] = Query(None, description="Comma-separated table names; all tables when omitted"),
    redis=Depends(get_redis),
    feed: ChangeFeed = Depends(get_change_feed),
):
    payload = decode_access_token(token) if token else None
    if payload is None or await is_token_revoked(redis, token):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    subscription = feed.subscribe(parse_tables(tables))
    logger.info("Realtime client connected for user %s (tables=%s)", payload.get("user_id"), tables or "*")

    async def forward():
        async for event in subscription:
            await websocket.send_text(event.model_dump_json())

    sender = asyncio.create_task(forward())
    try:
        # Inbound messages are ignored; receiving detects the disconnect.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        subscription.close()
        await stop_forwarding(sender)
        logger.info("Realtime client disconnected (%d events dropped)", subscription.dropped)
