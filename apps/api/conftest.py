"""Shared fixtures: an offline app, an app on in-memory SQLite, and fakes for its collaborators"""
from datetime import datetime
import socket
from typing import Any, List, Tuple

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from starlette.websockets import WebSocketState

from config import Settings
from database import Connected, configure_storage, create_db_and_tables, dispose_storage
from exceptions import UpstreamServiceFailed
from main import create_app
from routers.chatbot import limiter
from services.storage import HospitalStorage

IN_MEMORY_DB = "sqlite+aiosqlite://"


class FakeAssistant:
    """Stands in for the AI service"""

    def __init__(self, reply: str = "Visiting hours are 9am to 8pm.", fail: bool = False):
        self.reply = reply
        self.fail = fail
        self.seen: List[str] = []

    async def process_message(self, text: str):
        self.seen.append(text)
        if self.fail:
            raise UpstreamServiceFailed("AI service unreachable")
        return {"message": self.reply, "timestamp": datetime(2024, 1, 15, 9, 0)}

    async def analyze_symptoms(self, symptoms: str):
        self.seen.append(symptoms)
        if self.fail:
            raise UpstreamServiceFailed("AI service unreachable")
        return {"diagnosis": "Likely tension headache", "recommendations": ["Rest"], "urgency": "non_urgent"}


class RecordingHub:
    """Records broadcasts instead of sending them"""

    def __init__(self):
        self.events: List[Tuple[str, Any]] = []

    async def broadcast(self, event_type, payload) -> int:
        self.events.append((getattr(event_type, "value", event_type), payload))
        return 0


class FakeSocket:
    """Minimal WebSocket double for hub tests"""

    def __init__(self, on_send=None, fail: bool = False):
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED
        self.sent: List[str] = []
        self.accepted = False
        self.on_send = on_send
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_text(self, message: str):
        if self.on_send is not None:
            await self.on_send(self)
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(message)

    def close(self):
        self.client_state = WebSocketState.DISCONNECTED


def unreachable_storage(error: BaseException) -> HospitalStorage:
    """A configured storage whose driver cannot open a connection"""
    async def refuse_connection():
        raise error

    return HospitalStorage(Connected(create_async_engine(IN_MEMORY_DB, async_creator=refuse_connection)))


def install_fakes(app, assistant: FakeAssistant, record_broadcasts: bool) -> None:
    app.state.assistant = assistant
    if record_broadcasts:
        app.state.live_updates = RecordingHub()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()


@pytest.fixture
def assistant():
    return FakeAssistant()


@pytest.fixture
def offline_client(assistant):
    """App whose storage gate is tripped: no DATABASE_URL"""
    app = create_app(Settings(database_url=None))
    with TestClient(app) as client:
        install_fakes(app, assistant, record_broadcasts=True)
        yield client


@pytest.fixture
def db_client(assistant):
    """App backed by a fresh in-memory SQLite database"""
    app = create_app(Settings(database_url=IN_MEMORY_DB))
    with TestClient(app) as client:
        install_fakes(app, assistant, record_broadcasts=True)
        yield client


@pytest.fixture
def live_client(assistant):
    """Like db_client but with the real live update hub"""
    app = create_app(Settings(database_url=IN_MEMORY_DB))
    with TestClient(app) as client:
        install_fakes(app, assistant, record_broadcasts=False)
        yield client


@pytest_asyncio.fixture
async def storage():
    handle = configure_storage(Settings(database_url=IN_MEMORY_DB))
    await create_db_and_tables(handle)
    yield HospitalStorage(handle)
    await dispose_storage(handle)


@pytest.fixture
def offline_storage():
    return HospitalStorage(configure_storage(Settings(database_url=None)))


@pytest.fixture
def unreachable_client(assistant):
    """App with a database configured whose host does not resolve"""
    app = create_app(Settings(database_url=IN_MEMORY_DB, create_tables=False))
    with TestClient(app) as client:
        install_fakes(app, assistant, record_broadcasts=True)
        app.state.storage = unreachable_storage(socket.gaierror(-2, "Name or service not known"))
        yield client
