"""Websocket endpoint streaming change notifications to signed-in clients."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect, status

from hindu_unity.api.v1.dependencies import (
    ChangeFeedDep,
    CooldownServiceDep,
    SessionFactoryDep,
    authenticate_token,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    """Consume client frames until the socket closes; clients only listen."""
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        return


@router.websocket("/realtime")
async def realtime(
    websocket: WebSocket,
    session_factory: SessionFactoryDep,
    cooldown: CooldownServiceDep,
    feed: ChangeFeedDep,
    token: str | None = Query(None),
    tables: str = Query("posts", description="Comma-separated tables to watch"),
) -> None:
    """Push a JSON message for every change to the watched tables.

    The bearer token travels in the `token` query parameter because browsers
    cannot set headers on websocket requests. Clients refetch on each message.
    """
    if token is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    # The session is closed before streaming so the socket holds no pooled connection.
    with session_factory() as db:
        try:
            profile_id = authenticate_token(token, db, cooldown).id
        except HTTPException:
            profile_id = None
    if profile_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    requested = {name.strip() for name in tables.split(",") if name.strip()}
    async with feed.subscribe(requested) as subscription:
        await websocket.send_json({"type": "subscribed", "tables": sorted(subscription.tables)})
        logger.debug("Profile %s subscribed to %s", profile_id, sorted(subscription.tables))

        disconnect = asyncio.create_task(_wait_for_disconnect(websocket))
        try:
            while True:
                next_change = asyncio.create_task(subscription.queue.get())
                done, _ = await asyncio.wait(
                    {next_change, disconnect},
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if disconnect in done:
                    next_change.cancel()
                    break
                await websocket.send_json({"type": "change", **next_change.result().as_message()})
        finally:
            disconnect.cancel()
