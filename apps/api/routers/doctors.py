"""Doctor directory endpoints"""
from fastapi import APIRouter, Depends, status
from typing import List
import logging

from dependencies import get_storage, read_or_mock, require_found
from schemas import DoctorCreate, DoctorRead, AvailabilityUpdate
from services import mock_data
from services.storage import HospitalStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/doctors", tags=["Doctors"])


@router.get("", response_model=List[DoctorRead])
async def get_doctors(storage: HospitalStorage = Depends(get_storage)):
    """Get all doctors, alphabetical by name"""
    return await read_or_mock("doctors", storage.get_all_doctors, mock_data.mock_doctors)


@router.get("/department/{department}", response_model=List[DoctorRead])
async def get_doctors_by_department(department: str, storage: HospitalStorage = Depends(get_storage)):
    return await read_or_mock(
        f"doctors in {department}",
        lambda: storage.get_doctors_by_department(department),
        lambda: mock_data.mock_doctors(department=department),
    )


@router.get("/{doctor_id}", response_model=DoctorRead)
async def get_doctor(doctor_id: int, storage: HospitalStorage = Depends(get_storage)):
    doctor = await read_or_mock(
        f"doctor {doctor_id}",
        lambda: storage.get_doctor(doctor_id),
        lambda: mock_data.mock_doctor(doctor_id),
    )
    return require_found(doctor, "Doctor")


@router.post("", response_model=DoctorRead, status_code=status.HTTP_201_CREATED)
async def create_doctor(doctor_data: DoctorCreate, storage: HospitalStorage = Depends(get_storage)):
    """Register a new doctor"""
    doctor = await storage.create_doctor(doctor_data.model_dump())
    logger.info(f"Doctor {doctor.id} ({doctor.full_name}) created")
    return doctor


@router.patch("/{doctor_id}/availability", response_model=DoctorRead)
async def update_doctor_availability(
    doctor_id: int,
    update: AvailabilityUpdate,
    storage: HospitalStorage = Depends(get_storage),
):
    doctor = await storage.update_doctor_availability(doctor_id, update.is_available)
    return require_found(doctor, "Doctor")
