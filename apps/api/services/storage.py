"""
Storage adapter for the hospital schema.

Every operation is async and goes through ``_session()``, which consults the
availability gate first and translates SQLAlchemy failures into the
application's storage errors. Joined reads return plain dicts shaped like the
composite response schemas.
"""
from contextlib import asynccontextmanager
import asyncio
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy import text
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession

from database import Storage, is_storage_available
from exceptions import MediConnectError, StorageError, StorageUnavailable, StorageOperationFailed, ValidationFailed
from models import (
    Doctor, Patient, Ward, Bed, BedStatus, Appointment, AppointmentStatus,
    OrganDonor, DonorStatus, Alert, ChatMessage,
)
from services.filters import donor_matches
from validators.transitions import (
    validate_appointment_transition,
    validate_bed_update,
    validate_donor_transition,
)

logger = logging.getLogger(__name__)


def day_bounds(day: date):
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class HospitalStorage:
    """Typed CRUD over the relational store"""

    def __init__(self, storage: Storage):
        self._storage = storage

    @property
    def is_available(self) -> bool:
        return is_storage_available(self._storage)

    @asynccontextmanager
    async def _session(self):
        if not self.is_available:
            raise StorageUnavailable(f"Database not available: {self._storage.reason}")
        try:
            async with AsyncSession(self._storage.engine, expire_on_commit=False) as session:
                yield session
        except MediConnectError:
            raise
        except IntegrityError as e:
            raise ValidationFailed("Record conflicts with existing data") from e
        except PoolTimeoutError as e:
            raise StorageUnavailable("Database connection pool exhausted") from e
        except (DisconnectionError, InterfaceError) as e:
            raise StorageUnavailable(f"Database connection failed: {e}") from e
        except (OSError, asyncio.TimeoutError) as e:
            # Driver-level connect failures (DNS, refused, timed out) are not wrapped by SQLAlchemy
            raise StorageUnavailable(f"Database unreachable: {e!r}") from e
        except OperationalError as e:
            if e.connection_invalidated:
                raise StorageUnavailable(f"Database connection lost: {e}") from e
            raise StorageOperationFailed(f"Database operation failed: {e.orig}") from e
        except SQLAlchemyError as e:
            raise StorageOperationFailed(f"Database operation failed: {e}") from e

    async def ping(self) -> bool:
        """Round-trip a trivial query; False when the database cannot be reached"""
        try:
            async with self._session() as session:
                connection = await session.connection()
                await connection.execute(text("SELECT 1"))
            return True
        except StorageError as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    async def _all(self, statement) -> list:
        async with self._session() as session:
            result = await session.exec(statement)
            return list(result.all())

    async def _get(self, model, record_id: int):
        async with self._session() as session:
            return await session.get(model, record_id)

    async def _add(self, record):
        async with self._session() as session:
            session.add(record)
            await session.commit()
            await session.refresh(record)
            return record

    # ==================== DOCTORS ====================

    async def get_doctor(self, doctor_id: int) -> Optional[Doctor]:
        return await self._get(Doctor, doctor_id)

    async def get_all_doctors(self) -> List[Doctor]:
        return await self._all(select(Doctor).order_by(Doctor.full_name, Doctor.id))

    async def get_doctors_by_department(self, department: str) -> List[Doctor]:
        return await self._all(
            select(Doctor)
            .where(Doctor.department == department)
            .order_by(Doctor.full_name, Doctor.id)
        )

    async def create_doctor(self, data: Dict[str, Any]) -> Doctor:
        return await self._add(Doctor(**data))

    async def update_doctor_availability(self, doctor_id: int, is_available: bool) -> Optional[Doctor]:
        async with self._session() as session:
            doctor = await session.get(Doctor, doctor_id)
            if not doctor:
                return None
            doctor.is_available = is_available
            session.add(doctor)
            await session.commit()
            await session.refresh(doctor)
            return doctor

    # ==================== PATIENTS ====================

    async def get_patient(self, patient_id: int) -> Optional[Patient]:
        return await self._get(Patient, patient_id)

    async def get_all_patients(self) -> List[Patient]:
        return await self._all(select(Patient).order_by(Patient.last_name, Patient.first_name, Patient.id))

    async def create_patient(self, data: Dict[str, Any]) -> Patient:
        return await self._add(Patient(**data))

    async def update_patient(self, patient_id: int, changes: Dict[str, Any]) -> Optional[Patient]:
        async with self._session() as session:
            patient = await session.get(Patient, patient_id)
            if not patient:
                return None
            for key, value in changes.items():
                setattr(patient, key, value)
            session.add(patient)
            await session.commit()
            await session.refresh(patient)
            return patient

    # ==================== WARDS ====================

    async def get_ward(self, ward_id: int) -> Optional[Ward]:
        return await self._get(Ward, ward_id)

    async def get_all_wards(self) -> List[Ward]:
        return await self._all(select(Ward).order_by(Ward.name))

    async def create_ward(self, data: Dict[str, Any]) -> Ward:
        return await self._add(Ward(**data))

    # ==================== BEDS ====================

    async def get_bed(self, bed_id: int) -> Optional[Bed]:
        return await self._get(Bed, bed_id)

    async def get_all_beds(self) -> List[Bed]:
        return await self._all(select(Bed).order_by(Bed.bed_number, Bed.id))

    async def get_beds_by_ward(self, ward_id: int) -> List[Bed]:
        return await self._all(
            select(Bed).where(Bed.ward_id == ward_id).order_by(Bed.bed_number, Bed.id)
        )

    async def get_beds_by_status(self, status: BedStatus) -> List[Bed]:
        return await self._all(
            select(Bed).where(Bed.status == BedStatus(status)).order_by(Bed.bed_number, Bed.id)
        )

    async def get_beds_with_ward_info(self, status: Optional[BedStatus] = None) -> List[Dict[str, Any]]:
        query = (
            select(Bed, Ward)
            .join(Ward, Bed.ward_id == Ward.id)
            .order_by(Ward.name, Bed.bed_number, Bed.id)
        )
        if status:
            query = query.where(Bed.status == BedStatus(status))
        rows = await self._all(query)
        return [{**bed.model_dump(), "ward": ward.model_dump()} for bed, ward in rows]

    async def create_bed(self, data: Dict[str, Any]) -> Bed:
        async with self._session() as session:
            if not await session.get(Ward, data["ward_id"]):
                raise ValidationFailed("Ward not found")
            existing = (await session.exec(
                select(Bed)
                .where(Bed.ward_id == data["ward_id"])
                .where(Bed.bed_number == data["bed_number"])
            )).first()
            if existing:
                raise ValidationFailed("Bed number already exists in this ward")
            bed = Bed(**data)
            session.add(bed)
            await session.commit()
            await session.refresh(bed)
            return bed

    async def update_bed_status(
        self,
        bed_id: int,
        status: BedStatus,
        patient_id: Optional[int] = None,
        is_critical: bool = False,
    ) -> Optional[Bed]:
        validate_bed_update(status, patient_id, is_critical)
        async with self._session() as session:
            bed = await session.get(Bed, bed_id)
            if not bed:
                return None
            if patient_id is not None and not await session.get(Patient, patient_id):
                raise ValidationFailed("Patient not found")
            bed.status = BedStatus(status)
            bed.patient_id = patient_id
            bed.is_critical = is_critical
            bed.last_updated = datetime.utcnow()
            session.add(bed)
            await session.commit()
            await session.refresh(bed)
            return bed

    # ==================== APPOINTMENTS ====================

    async def get_appointment(self, appointment_id: int) -> Optional[Appointment]:
        return await self._get(Appointment, appointment_id)

    async def get_all_appointments(self) -> List[Appointment]:
        return await self._all(select(Appointment).order_by(Appointment.appointment_date.desc()))

    async def get_appointments_in_range(self, start: datetime, end: datetime) -> List[Appointment]:
        return await self._all(
            select(Appointment)
            .where(Appointment.appointment_date >= start)
            .where(Appointment.appointment_date < end)
            .order_by(Appointment.appointment_date)
        )

    async def get_appointments_by_date(self, day: date) -> List[Appointment]:
        return await self.get_appointments_in_range(*day_bounds(day))

    async def get_appointments_by_doctor(self, doctor_id: int) -> List[Appointment]:
        return await self._all(
            select(Appointment)
            .where(Appointment.doctor_id == doctor_id)
            .order_by(Appointment.appointment_date.desc())
        )

    async def get_appointments_by_patient(self, patient_id: int) -> List[Appointment]:
        return await self._all(
            select(Appointment)
            .where(Appointment.patient_id == patient_id)
            .order_by(Appointment.appointment_date.desc())
        )

    async def get_appointments_with_details(self) -> List[Dict[str, Any]]:
        rows = await self._all(
            select(Appointment, Patient, Doctor)
            .join(Patient, Appointment.patient_id == Patient.id)
            .join(Doctor, Appointment.doctor_id == Doctor.id)
            .order_by(Appointment.appointment_date.desc())
        )
        return [
            {**appointment.model_dump(), "patient": patient.model_dump(), "doctor": doctor.model_dump()}
            for appointment, patient, doctor in rows
        ]

    async def create_appointment(self, data: Dict[str, Any]) -> Appointment:
        async with self._session() as session:
            if not await session.get(Patient, data["patient_id"]):
                raise ValidationFailed("Patient not found")
            if not await session.get(Doctor, data["doctor_id"]):
                raise ValidationFailed("Doctor not found")
            appointment = Appointment(**data)
            session.add(appointment)
            await session.commit()
            await session.refresh(appointment)
            return appointment

    async def update_appointment_status(
        self, appointment_id: int, status: AppointmentStatus
    ) -> Optional[Appointment]:
        async with self._session() as session:
            appointment = await session.get(Appointment, appointment_id)
            if not appointment:
                return None
            validate_appointment_transition(appointment.status, status)
            appointment.status = AppointmentStatus(status)
            session.add(appointment)
            await session.commit()
            await session.refresh(appointment)
            return appointment

    # ==================== ORGAN DONORS ====================

    async def get_organ_donor(self, donor_id: int) -> Optional[OrganDonor]:
        return await self._get(OrganDonor, donor_id)

    async def get_all_organ_donors(self) -> List[OrganDonor]:
        return await self.search_organ_donors()

    async def get_organ_donors_by_type(self, organ_type: str) -> List[OrganDonor]:
        return await self.search_organ_donors(organ_type=organ_type)

    async def get_organ_donors_by_blood_type(self, blood_type: str) -> List[OrganDonor]:
        return await self.search_organ_donors(blood_type=blood_type)

    async def search_organ_donors(
        self, blood_type: Optional[str] = None, organ_type: Optional[str] = None
    ) -> List[OrganDonor]:
        query = select(OrganDonor).order_by(OrganDonor.last_updated.desc(), OrganDonor.id.desc())
        if blood_type:
            query = query.where(OrganDonor.blood_type == blood_type)
        donors = await self._all(query)
        # Organs live in a JSON list; substring matching is done here so it agrees with the mock path
        return [donor for donor in donors if donor_matches(donor, blood_type, organ_type)]

    async def create_organ_donor(self, data: Dict[str, Any]) -> OrganDonor:
        return await self._add(OrganDonor(**data))

    async def update_organ_donor_status(self, donor_id: int, status: DonorStatus) -> Optional[OrganDonor]:
        async with self._session() as session:
            donor = await session.get(OrganDonor, donor_id)
            if not donor:
                return None
            validate_donor_transition(donor.status, status)
            donor.status = DonorStatus(status)
            donor.last_updated = datetime.utcnow()
            session.add(donor)
            await session.commit()
            await session.refresh(donor)
            return donor

    # ==================== ALERTS ====================

    async def get_alert(self, alert_id: int) -> Optional[Alert]:
        return await self._get(Alert, alert_id)

    async def get_all_alerts(self) -> List[Alert]:
        return await self._all(select(Alert).order_by(Alert.created_at.desc(), Alert.id.desc()))

    async def get_unread_alerts(self) -> List[Alert]:
        return await self._all(
            select(Alert)
            .where(Alert.is_read == False)  # noqa: E712
            .order_by(Alert.created_at.desc(), Alert.id.desc())
        )

    async def create_alert(self, data: Dict[str, Any]) -> Alert:
        return await self._add(Alert(**data))

    async def mark_alert_as_read(self, alert_id: int) -> Optional[Alert]:
        """Idempotent: an already-read alert is returned unchanged"""
        async with self._session() as session:
            alert = await session.get(Alert, alert_id)
            if not alert:
                return None
            if not alert.is_read:
                alert.is_read = True
                session.add(alert)
                await session.commit()
                await session.refresh(alert)
            return alert

    # ==================== CHAT ====================

    async def get_chat_messages(self, session_id: str) -> List[ChatMessage]:
        return await self._all(
            select(ChatMessage)
            .where(ChatMessage.session_id == session_id)
            .order_by(ChatMessage.timestamp, ChatMessage.id)
        )

    async def create_chat_message(self, session_id: str, message: str, is_user: bool) -> ChatMessage:
        return await self._add(ChatMessage(session_id=session_id, message=message, is_user=is_user))

    # ==================== DASHBOARD ====================

    async def dashboard_stats(self, today: date) -> Dict[str, int]:
        start, end = day_bounds(today)
        async with self._session() as session:
            async def count(model, *conditions) -> int:
                result = await session.exec(select(func.count()).select_from(model).where(*conditions))
                return result.one()

            return {
                "available_beds": await count(Bed, Bed.status == BedStatus.AVAILABLE),
                "occupied_beds": await count(Bed, Bed.status == BedStatus.OCCUPIED),
                "today_appointments": await count(
                    Appointment,
                    Appointment.appointment_date >= start,
                    Appointment.appointment_date < end,
                    Appointment.status != AppointmentStatus.CANCELLED,
                ),
                "active_donors": await count(OrganDonor, OrganDonor.status == DonorStatus.AVAILABLE),
                "emergency_cases": await count(
                    Bed, Bed.status == BedStatus.OCCUPIED, Bed.is_critical == True  # noqa: E712
                ),
                "unread_alerts": await count(Alert, Alert.is_read == False),  # noqa: E712
            }
