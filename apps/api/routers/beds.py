"""Bed management endpoints"""
from fastapi import APIRouter, Depends, status
from typing import List, Optional
import logging

from dependencies import get_storage, get_live_updates, read_or_mock, require_found
from models import BedStatus
from schemas import BedCreate, BedRead, BedStatusUpdate, BedWithWard
from services import mock_data
from services.live_updates import LiveEvent, LiveUpdateHub
from services.storage import HospitalStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/beds", tags=["Beds"])


@router.get("", response_model=List[BedWithWard])
async def get_beds(
    status: Optional[BedStatus] = None,
    storage: HospitalStorage = Depends(get_storage),
):
    """Get all beds with their ward, optionally filtered by status"""
    return await read_or_mock(
        "beds",
        lambda: storage.get_beds_with_ward_info(status),
        lambda: mock_data.mock_beds_with_ward(status.value if status else None),
    )


@router.get("/by-ward/{ward_id}", response_model=List[BedRead])
async def get_beds_by_ward(ward_id: int, storage: HospitalStorage = Depends(get_storage)):
    return await read_or_mock(
        f"beds in ward {ward_id}",
        lambda: storage.get_beds_by_ward(ward_id),
        lambda: mock_data.mock_beds(ward_id=ward_id),
    )


@router.get("/{bed_id}", response_model=BedRead)
async def get_bed(bed_id: int, storage: HospitalStorage = Depends(get_storage)):
    bed = await read_or_mock(
        f"bed {bed_id}",
        lambda: storage.get_bed(bed_id),
        lambda: mock_data.mock_bed(bed_id),
    )
    return require_found(bed, "Bed")


@router.post("", response_model=BedRead, status_code=status.HTTP_201_CREATED)
async def create_bed(bed_data: BedCreate, storage: HospitalStorage = Depends(get_storage)):
    """Create a new bed"""
    return await storage.create_bed(bed_data.model_dump())


@router.patch("/{bed_id}/status", response_model=BedRead)
async def update_bed_status(
    bed_id: int,
    update: BedStatusUpdate,
    storage: HospitalStorage = Depends(get_storage),
    live_updates: LiveUpdateHub = Depends(get_live_updates),
):
    """Assign or free a bed and notify live viewers"""
    bed = require_found(
        await storage.update_bed_status(bed_id, update.status, update.patient_id, update.is_critical),
        "Bed",
    )
    result = BedRead.model_validate(bed)
    logger.info(f"Bed {bed_id} is now {result.status.value}")
    await live_updates.broadcast(LiveEvent.BED_STATUS_UPDATE, result)
    return result
