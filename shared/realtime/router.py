import asyncio

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from shared.security.dependencies import verify_api_key

from .feed import ChangeEvent

logger = structlog.get_logger(__name__)

# Tables clients may listen to. The auth channel stays in-process only.
STREAMABLE_CHANNELS = {"products", "orders", "subscription_plans"}

router = APIRouter(tags=["Realtime"])


@router.websocket("/realtime/{channel}")
async def stream_changes(websocket: WebSocket, channel: str, apikey: str | None = None):
    if not verify_api_key(apikey) or channel not in STREAMABLE_CHANNELS:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()
    unsubscribe = websocket.app.state.change_feed.subscribe(channel, queue.put_nowait)
    try:
        await websocket.accept()
        logger.info("realtime_client_connected", channel=channel)
        while True:
            event = await queue.get()
            await websocket.send_json(event.model_dump(mode="json"))
    except WebSocketDisconnect:
        logger.info("realtime_client_disconnected", channel=channel)
    finally:
        unsubscribe()
