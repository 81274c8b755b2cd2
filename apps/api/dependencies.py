"""Request-scoped access to the objects the application owns"""
from typing import Any, Awaitable, Callable, Optional, TypeVar
import logging

from fastapi import Request, WebSocket

from exceptions import NotFound, StorageError
from services.ai_assistant import AIAssistant
from services.live_updates import LiveUpdateHub
from services.storage import HospitalStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_storage(request: Request) -> HospitalStorage:
    return request.app.state.storage


def get_live_updates(request: Request) -> LiveUpdateHub:
    return request.app.state.live_updates


def get_ws_live_updates(websocket: WebSocket) -> LiveUpdateHub:
    return websocket.app.state.live_updates


def get_assistant(request: Request) -> AIAssistant:
    return request.app.state.assistant


async def read_or_mock(
    description: str,
    query: Callable[[], Awaitable[T]],
    fallback: Callable[[], Any],
) -> T:
    """
    Run a read against storage; on any storage error log it and serve the
    mock equivalent instead. Readers never see the failure.
    """
    try:
        return await query()
    except StorageError as e:
        logger.warning(f"Error fetching {description}, using mock data: {e}")
        return fallback()


def require_found(record: Optional[T], what: str) -> T:
    if record is None:
        raise NotFound(f"{what} not found")
    return record
