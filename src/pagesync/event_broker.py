import asyncio
import contextlib
import logging
import weakref

from pagesync.schemas import new_id
from pagesync.schemas import OutboundEvent

logger = logging.getLogger(__name__)


class Connection:
    """Outbound half of one client socket.

    Frames are queued on an unbounded FIFO outbox and written by a single
    writer task, so a slow client only ever delays its own stream.
    """

    def __init__(self, websocket):
        self.id = new_id()
        self.websocket = websocket
        self.outbox: asyncio.Queue[str] = asyncio.Queue()
        self.is_open = True
        self.writer: asyncio.Task | None = None

    def deliver(self, frame: str) -> bool:
        if not self.is_open:
            return False
        self.outbox.put_nowait(frame)
        return True

    async def drain(self):
        while True:
            frame = await self.outbox.get()
            try:
                await self.websocket.send_text(frame)
            except Exception:
                # Dead socket: stop writing, the receive loop will clean up
                logger.debug("Send to %s failed, closing its outbox", self.id, exc_info=True)
                self.is_open = False
                return
            finally:
                self.outbox.task_done()


class EventBroker:
    def __init__(self):
        # Owned by the transport route. A live writer task keeps its connection
        # reachable, so entries leave only through detach() or disconnect()
        self.connections: weakref.WeakValueDictionary[str, Connection] = (
            weakref.WeakValueDictionary()
        )

    def connect(self, connection: Connection) -> None:
        self.connections[connection.id] = connection
        connection.writer = asyncio.create_task(
            connection.drain(), name=f"outbox-{connection.id}"
        )

    def detach(self, connection: Connection) -> None:
        """Stop fan-out to a connection without waiting for its writer."""
        connection.is_open = False
        self.connections.pop(connection.id, None)

    async def disconnect(self, connection: Connection) -> None:
        self.detach(connection)
        writer = connection.writer
        if writer is None or writer.done():
            return
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await writer

    def send(self, connection: Connection, event: OutboundEvent) -> bool:
        return connection.deliver(event.to_frame())

    def broadcast(self, event: OutboundEvent) -> int:
        frame = event.to_frame()

        delivered = 0
        for connection in list(self.connections.values()):
            if connection.deliver(frame):
                delivered += 1
        return delivered

    async def shutdown(self) -> None:
        for connection in list(self.connections.values()):
            await self.disconnect(connection)

    def __len__(self) -> int:
        return len(self.connections)
