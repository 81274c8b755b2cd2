"""Dashboard aggregate endpoints"""
from fastapi import APIRouter, Depends
from datetime import date

from dependencies import get_storage, read_or_mock
from schemas import DashboardStats
from services import mock_data
from services.storage import HospitalStorage

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(storage: HospitalStorage = Depends(get_storage)):
    """Bed, appointment, donor and alert counts for the landing page"""
    return await read_or_mock(
        "dashboard stats",
        lambda: storage.dashboard_stats(date.today()),
        mock_data.mock_dashboard_stats,
    )
