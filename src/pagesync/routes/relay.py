import logging

from fastapi import APIRouter
from fastapi import WebSocket

from pagesync.connection_handler import ConnectionHandler
from pagesync.event_broker import Connection
from pagesync.state import RelayState

logger = logging.getLogger(__name__)

router = APIRouter(tags=["relay"])


@router.websocket("/")
@router.websocket("/ws")
async def relay_socket(websocket: WebSocket):
    state: RelayState = websocket.app.state.relay
    await websocket.accept()

    connection = Connection(websocket)
    handler = ConnectionHandler(connection, state.registry, state.feed, state.broker)
    handler.open()

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes") or b""
            handler.handle(raw)
    except Exception:
        # Transport errors end the connection the same way a close does
        logger.exception("WebSocket error on %s", connection.id)
    finally:
        await handler.close()
