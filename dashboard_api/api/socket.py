"""WebSocket endpoint bridging dashboard sessions to the event relay."""
import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from dashboard_api.realtime import relay

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.websocket("/socket")
async def socket_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    subscriber_id = relay.subscribe(websocket)
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                logger.warning("socket.invalid_json", subscriber_id=subscriber_id)
                continue
            await relay.handle_message(websocket, message)
    except WebSocketDisconnect:
        pass
    finally:
        relay.unsubscribe(subscriber_id)
