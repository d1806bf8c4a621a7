import os

# Minimal values for tests
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
import asyncio
import json

from fastapi.testclient import TestClient
from httpx import ASGITransport
from httpx import AsyncClient
import pytest
import pytest_asyncio

from pagesync.app import create_app
from pagesync.connection_handler import ConnectionHandler
from pagesync.event_broker import Connection
from pagesync.state import RelayState


class FakeWebSocket:
    """Records frames the way a client would see them."""

    def __init__(self, fail: bool = False):
        self.frames: list[str] = []
        self.fail = fail

    async def send_text(self, frame: str) -> None:
        if self.fail:
            raise RuntimeError("socket is closed")
        self.frames.append(frame)

    @property
    def messages(self) -> list[dict]:
        return [json.loads(frame) for frame in self.frames]

    @property
    def types(self) -> list[str]:
        return [message["type"] for message in self.messages]


class StalledWebSocket(FakeWebSocket):
    """A client that never finishes receiving."""

    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()

    async def send_text(self, frame: str) -> None:
        await self.release.wait()
        self.frames.append(frame)


@pytest.fixture
def relay_state():
    return RelayState()


@pytest.fixture
def fake_socket():
    return FakeWebSocket


@pytest.fixture
def stalled_socket():
    return StalledWebSocket


# ---- Handlers wired to fake sockets; closed after each test ----
@pytest_asyncio.fixture
async def connect(relay_state):
    handlers: list[ConnectionHandler] = []

    def _connect(websocket=None):
        websocket = websocket or FakeWebSocket()
        handler = ConnectionHandler(
            Connection(websocket),
            relay_state.registry,
            relay_state.feed,
            relay_state.broker,
        )
        handler.open()
        handlers.append(handler)
        return handler, websocket

    yield _connect

    for handler in handlers:
        await handler.close()


@pytest.fixture
def flush():
    async def _flush(*handlers: ConnectionHandler) -> None:
        for handler in handlers:
            if handler.connection.is_open:
                await asyncio.wait_for(handler.connection.outbox.join(), timeout=1.0)

    return _flush


@pytest.fixture
def frame():
    return lambda payload: json.dumps(payload)


# ---- Application bound to its own fresh state ----
@pytest.fixture
def app(relay_state):
    return create_app(relay_state)


# ---- HTTP client bound to the ASGI app ----
@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


# ---- WebSocket-capable client ----
@pytest.fixture
def socket_client(app):
    with TestClient(app) as tc:
        yield tc


# ---- BeautifulSoup helper ----
@pytest.fixture
def soup():
    from bs4 import BeautifulSoup

    return lambda html: BeautifulSoup(html, "html.parser")
