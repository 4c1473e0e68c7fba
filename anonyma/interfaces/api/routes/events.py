"""Flujo de eventos en vivo por SSE y websocket."""

from __future__ import annotations

import json
import logging

import anyio
from anyio import to_thread
from fastapi import APIRouter, Depends, HTTPException, Request, WebSocket, WebSocketDisconnect
from sse_starlette.sse import EventSourceResponse

from anonyma.config import get_settings
from anonyma.domain.entities import Identity
from anonyma.infrastructure.notifications import NotificationHub, stream_events
from anonyma.interfaces.api.dependencies import (
    extract_stream_token,
    get_notification_hub,
    get_stream_identity,
    resolve_stream_identity,
)

router = APIRouter(prefix="/events", tags=["events"])
logger = logging.getLogger(__name__)

_STREAM_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "X-Accel-Buffering": "no",
}


@router.get("")
async def stream_live_events(
    request: Request,
    identity: Identity = Depends(get_stream_identity),
    hub: NotificationHub = Depends(get_notification_hub),
) -> EventSourceResponse:
    """Abre un flujo SSE con los eventos dirigidos al usuario autenticado.

    El token puede enviarse en la cabecera ``Authorization`` o como parámetro
    ``token``, ya que ``EventSource`` no permite cabeceras personalizadas.
    """

    return EventSourceResponse(
        stream_events(
            hub,
            identity.user_id,
            get_settings().sse_keepalive_seconds,
            is_disconnected=request.is_disconnected,
        ),
        headers=_STREAM_HEADERS,
    )


@router.websocket("/ws")
async def live_events_websocket(
    websocket: WebSocket,
    hub: NotificationHub = Depends(get_notification_hub),
) -> None:
    """Websocket que reenvía el mismo flujo de eventos como mensajes JSON."""

    try:
        identity = await to_thread.run_sync(
            resolve_stream_identity, extract_stream_token(websocket)
        )
    except HTTPException:
        await websocket.close(code=1008)
        return

    await websocket.accept()

    async def _forward(cancel_scope: anyio.CancelScope) -> None:
        stream = stream_events(hub, identity.user_id, get_settings().sse_keepalive_seconds)
        try:
            async for item in stream:
                await websocket.send_json(
                    {"event": item["event"], "data": json.loads(item["data"])}
                )
        finally:
            await stream.aclose()
        cancel_scope.cancel()

    async def _watch_disconnect(cancel_scope: anyio.CancelScope) -> None:
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        cancel_scope.cancel()

    async with anyio.create_task_group() as task_group:
        task_group.start_soon(_forward, task_group.cancel_scope)
        task_group.start_soon(_watch_disconnect, task_group.cancel_scope)
    logger.info("Websocket stream finished for user %s", identity.user_id)
