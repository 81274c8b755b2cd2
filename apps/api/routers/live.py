"""WebSocket endpoint streaming live updates to dashboard viewers"""
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from dependencies import get_ws_live_updates
from services.live_updates import LiveUpdateHub

router = APIRouter(tags=["Live Updates"])


@router.websocket("/ws")
async def live_updates_socket(
    websocket: WebSocket,
    live_updates: LiveUpdateHub = Depends(get_ws_live_updates),
):
    """Viewers only listen; ``ping`` is answered with ``pong`` to keep the connection alive"""
    await live_updates.connect(websocket)
    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        pass
    finally:
        await live_updates.disconnect(websocket)
