"""Organ donor registry endpoints"""
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
import logging

from dependencies import get_storage, get_live_updates, read_or_mock, require_found
from schemas import OrganDonorCreate, OrganDonorRead, DonorStatusUpdate
from services import mock_data
from services.live_updates import LiveEvent, LiveUpdateHub
from services.storage import HospitalStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/organ-donors", tags=["Organ Donors"])


@router.get("", response_model=List[OrganDonorRead])
async def search_organ_donors(
    blood_type: Optional[str] = Query(default=None, alias="bloodType"),
    organ_type: Optional[str] = Query(default=None, alias="organType"),
    storage: HospitalStorage = Depends(get_storage),
):
    """
    Search donors. ``bloodType`` must match exactly; ``organType`` matches any
    listed organ case-insensitively as a substring.
    """
    return await read_or_mock(
        "organ donors",
        lambda: storage.search_organ_donors(blood_type, organ_type),
        lambda: mock_data.mock_organ_donors(blood_type, organ_type),
    )


@router.get("/{donor_id}", response_model=OrganDonorRead)
async def get_organ_donor(donor_id: int, storage: HospitalStorage = Depends(get_storage)):
    donor = await read_or_mock(
        f"organ donor {donor_id}",
        lambda: storage.get_organ_donor(donor_id),
        lambda: mock_data.mock_organ_donor(donor_id),
    )
    return require_found(donor, "Organ donor")


@router.post("", response_model=OrganDonorRead, status_code=status.HTTP_201_CREATED)
async def create_organ_donor(
    donor_data: OrganDonorCreate,
    storage: HospitalStorage = Depends(get_storage),
    live_updates: LiveUpdateHub = Depends(get_live_updates),
):
    """Register a donor and notify live viewers"""
    donor = await storage.create_organ_donor(donor_data.model_dump())
    result = OrganDonorRead.model_validate(donor)
    logger.info(f"Organ donor {result.id} registered ({result.blood_type})")
    await live_updates.broadcast(LiveEvent.NEW_DONOR, result)
    return result


@router.patch("/{donor_id}/status", response_model=OrganDonorRead)
async def update_organ_donor_status(
    donor_id: int,
    update: DonorStatusUpdate,
    storage: HospitalStorage = Depends(get_storage),
    live_updates: LiveUpdateHub = Depends(get_live_updates),
):
    donor = require_found(await storage.update_organ_donor_status(donor_id, update.status), "Organ donor")
    result = OrganDonorRead.model_validate(donor)
    await live_updates.broadcast(LiveEvent.DONOR_STATUS_UPDATE, result)
    return result
