"""Staff alert endpoints"""
from fastapi import APIRouter, Depends, status
from typing import List

from dependencies import get_storage, get_live_updates, read_or_mock, require_found
from schemas import AlertCreate, AlertRead
from services import mock_data
from services.live_updates import LiveEvent, LiveUpdateHub
from services.storage import HospitalStorage

router = APIRouter(prefix="/api/alerts", tags=["Alerts"])


@router.get("", response_model=List[AlertRead])
async def get_alerts(storage: HospitalStorage = Depends(get_storage)):
    """All alerts, newest first"""
    return await read_or_mock("alerts", storage.get_all_alerts, mock_data.mock_alerts)


@router.get("/unread", response_model=List[AlertRead])
async def get_unread_alerts(storage: HospitalStorage = Depends(get_storage)):
    return await read_or_mock(
        "unread alerts",
        storage.get_unread_alerts,
        lambda: mock_data.mock_alerts(unread_only=True),
    )


@router.post("", response_model=AlertRead, status_code=status.HTTP_201_CREATED)
async def create_alert(
    alert_data: AlertCreate,
    storage: HospitalStorage = Depends(get_storage),
    live_updates: LiveUpdateHub = Depends(get_live_updates),
):
    alert = AlertRead.model_validate(await storage.create_alert(alert_data.model_dump()))
    await live_updates.broadcast(LiveEvent.NEW_ALERT, alert)
    return alert


@router.patch("/{alert_id}/read", response_model=AlertRead)
async def mark_alert_as_read(alert_id: int, storage: HospitalStorage = Depends(get_storage)):
    """Mark an alert read; repeating the call is harmless"""
    return require_found(await storage.mark_alert_as_read(alert_id), "Alert")
