"""Patient registry endpoints"""
from fastapi import APIRouter, Depends, status
from typing import List
import logging

from dependencies import get_storage, read_or_mock, require_found
from exceptions import ValidationFailed
from schemas import PatientCreate, PatientUpdate, PatientRead, AppointmentRead
from services import mock_data
from services.storage import HospitalStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/patients", tags=["Patients"])


@router.get("", response_model=List[PatientRead])
async def get_patients(storage: HospitalStorage = Depends(get_storage)):
    """Get all patients ordered by last name"""
    return await read_or_mock("patients", storage.get_all_patients, mock_data.mock_patients)


@router.get("/{patient_id}", response_model=PatientRead)
async def get_patient(patient_id: int, storage: HospitalStorage = Depends(get_storage)):
    patient = await read_or_mock(
        f"patient {patient_id}",
        lambda: storage.get_patient(patient_id),
        lambda: mock_data.mock_patient(patient_id),
    )
    return require_found(patient, "Patient")


@router.get("/{patient_id}/appointments", response_model=List[AppointmentRead])
async def get_patient_appointments(patient_id: int, storage: HospitalStorage = Depends(get_storage)):
    """Appointment history for one patient, newest first"""
    return await read_or_mock(
        f"appointments for patient {patient_id}",
        lambda: storage.get_appointments_by_patient(patient_id),
        lambda: mock_data.mock_appointments(patient_id=patient_id),
    )


@router.post("", response_model=PatientRead, status_code=status.HTTP_201_CREATED)
async def create_patient(patient_data: PatientCreate, storage: HospitalStorage = Depends(get_storage)):
    """Admit a new patient record"""
    patient = await storage.create_patient(patient_data.model_dump())
    logger.info(f"Patient {patient.id} created")
    return patient


@router.patch("/{patient_id}", response_model=PatientRead)
async def update_patient(
    patient_id: int,
    patient_data: PatientUpdate,
    storage: HospitalStorage = Depends(get_storage),
):
    """Update patient details"""
    changes = patient_data.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationFailed("No fields to update")
    patient = await storage.update_patient(patient_id, changes)
    return require_found(patient, "Patient")
