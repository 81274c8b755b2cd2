"""Appointment scheduling endpoints"""
from fastapi import APIRouter, Depends, Query, status
from typing import List
from datetime import date, datetime
import logging

from dependencies import get_storage, get_live_updates, read_or_mock, require_found
from exceptions import ValidationFailed
from schemas import (
    AppointmentCreate, AppointmentRead, AppointmentStatusUpdate, AppointmentWithDetails, naive_utc,
)
from services import mock_data
from services.live_updates import LiveEvent, LiveUpdateHub
from services.storage import HospitalStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/appointments", tags=["Appointments"])


@router.get("", response_model=List[AppointmentWithDetails])
async def get_appointments(storage: HospitalStorage = Depends(get_storage)):
    """All appointments with patient and doctor details, newest first"""
    return await read_or_mock(
        "appointments",
        storage.get_appointments_with_details,
        mock_data.mock_appointments_with_details,
    )


@router.get("/today", response_model=List[AppointmentRead])
async def get_today_appointments(storage: HospitalStorage = Depends(get_storage)):
    """Today's appointments in time order"""
    return await read_or_mock(
        "today's appointments",
        lambda: storage.get_appointments_by_date(date.today()),
        lambda: mock_data.mock_appointments_by_date(mock_data.MOCK_TODAY),
    )


@router.get("/range", response_model=List[AppointmentRead])
async def get_appointments_in_range(
    start: datetime = Query(...),
    end: datetime = Query(...),
    storage: HospitalStorage = Depends(get_storage),
):
    """Appointments with start <= date < end, in time order"""
    start, end = naive_utc(start), naive_utc(end)
    if end <= start:
        raise ValidationFailed("end must be after start")
    return await read_or_mock(
        "appointments in range",
        lambda: storage.get_appointments_in_range(start, end),
        lambda: mock_data.mock_appointments(start=start, end=end),
    )


@router.get("/by-doctor/{doctor_id}", response_model=List[AppointmentRead])
async def get_doctor_appointments(doctor_id: int, storage: HospitalStorage = Depends(get_storage)):
    return await read_or_mock(
        f"appointments for doctor {doctor_id}",
        lambda: storage.get_appointments_by_doctor(doctor_id),
        lambda: mock_data.mock_appointments(doctor_id=doctor_id),
    )


@router.get("/{appointment_id}", response_model=AppointmentRead)
async def get_appointment(appointment_id: int, storage: HospitalStorage = Depends(get_storage)):
    appointment = await read_or_mock(
        f"appointment {appointment_id}",
        lambda: storage.get_appointment(appointment_id),
        lambda: mock_data.mock_appointment(appointment_id),
    )
    return require_found(appointment, "Appointment")


@router.post("", response_model=AppointmentRead, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment_data: AppointmentCreate,
    storage: HospitalStorage = Depends(get_storage),
    live_updates: LiveUpdateHub = Depends(get_live_updates),
):
    """Book an appointment and notify live viewers"""
    appointment = await storage.create_appointment(appointment_data.model_dump())
    result = AppointmentRead.model_validate(appointment)
    logger.info(f"Appointment {result.id} booked for patient {result.patient_id}")
    await live_updates.broadcast(LiveEvent.NEW_APPOINTMENT, result)
    return result


@router.patch("/{appointment_id}/status", response_model=AppointmentRead)
async def update_appointment_status(
    appointment_id: int,
    update: AppointmentStatusUpdate,
    storage: HospitalStorage = Depends(get_storage),
    live_updates: LiveUpdateHub = Depends(get_live_updates),
):
    """Move an appointment forward in its lifecycle"""
    appointment = require_found(
        await storage.update_appointment_status(appointment_id, update.status),
        "Appointment",
    )
    result = AppointmentRead.model_validate(appointment)
    await live_updates.broadcast(LiveEvent.APPOINTMENT_STATUS_UPDATE, result)
    return result
