"""Ward endpoints"""
from fastapi import APIRouter, Depends, status
from typing import List

from dependencies import get_storage, read_or_mock, require_found
from schemas import WardCreate, WardRead
from services import mock_data
from services.storage import HospitalStorage

router = APIRouter(prefix="/api/wards", tags=["Wards"])


@router.get("", response_model=List[WardRead])
async def get_wards(storage: HospitalStorage = Depends(get_storage)):
    """Get all wards"""
    return await read_or_mock("wards", storage.get_all_wards, mock_data.mock_wards)


@router.get("/{ward_id}", response_model=WardRead)
async def get_ward(ward_id: int, storage: HospitalStorage = Depends(get_storage)):
    """Get ward details"""
    ward = await read_or_mock(
        f"ward {ward_id}",
        lambda: storage.get_ward(ward_id),
        lambda: mock_data.mock_ward(ward_id),
    )
    return require_found(ward, "Ward")


@router.post("", response_model=WardRead, status_code=status.HTTP_201_CREATED)
async def create_ward(ward_data: WardCreate, storage: HospitalStorage = Depends(get_storage)):
    """Create a new ward"""
    return await storage.create_ward(ward_data.model_dump())
