from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from models import BedStatus, AppointmentStatus, DonorStatus, AlertSeverity

BLOOD_TYPES = {"A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"}


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Datetimes are stored naive in UTC; aware input is converted"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case accepted on input"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# Doctor schemas
class DoctorCreate(CamelModel):
    full_name: str = Field(min_length=1)
    specialization: str = Field(min_length=1)
    department: str = Field(min_length=1)
    license_number: Optional[str] = None
    phone_number: Optional[str] = None
    is_available: bool = True
    working_hours: Optional[str] = None

class DoctorRead(CamelModel):
    id: int
    full_name: str
    specialization: str
    department: str
    license_number: Optional[str] = None
    phone_number: Optional[str] = None
    is_available: bool
    working_hours: Optional[str] = None
    created_at: Optional[datetime] = None

class AvailabilityUpdate(CamelModel):
    is_available: bool


# Patient schemas
class PatientCreate(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    blood_type: Optional[str] = None
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    condition: Optional[str] = None
    room: Optional[str] = None
    medical_history: Optional[str] = None

    @field_validator("blood_type")
    @classmethod
    def check_blood_type(cls, v):
        if v is not None and v not in BLOOD_TYPES:
            raise ValueError(f"Unknown blood type: {v}")
        return v

    @field_validator("date_of_birth")
    @classmethod
    def date_of_birth_to_utc(cls, v):
        return naive_utc(v)

class PatientUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    condition: Optional[str] = None
    room: Optional[str] = None
    medical_history: Optional[str] = None

class PatientRead(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    blood_type: Optional[str] = None
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    condition: Optional[str] = None
    room: Optional[str] = None
    medical_history: Optional[str] = None
    created_at: Optional[datetime] = None


# Ward and bed schemas
class WardCreate(CamelModel):
    name: str = Field(min_length=1)
    department: Optional[str] = None
    capacity: int = Field(ge=0)

class WardRead(CamelModel):
    id: int
    name: str
    department: Optional[str] = None
    capacity: int
    created_at: Optional[datetime] = None

class BedCreate(CamelModel):
    ward_id: int
    bed_number: str = Field(min_length=1)
    equipment: Optional[str] = None
    notes: Optional[str] = None

class BedStatusUpdate(CamelModel):
    status: BedStatus
    patient_id: Optional[int] = None
    is_critical: bool = False

class BedRead(CamelModel):
    id: int
    ward_id: int
    bed_number: str
    status: BedStatus
    is_critical: bool = False
    patient_id: Optional[int] = None
    equipment: Optional[str] = None
    notes: Optional[str] = None
    last_updated: Optional[datetime] = None

class BedWithWard(BedRead):
    ward: WardRead


# Appointment schemas
class AppointmentCreate(CamelModel):
    patient_id: int
    doctor_id: int
    appointment_date: datetime
    duration: int = Field(default=30, ge=5, le=480)
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    reason: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("appointment_date")
    @classmethod
    def appointment_date_to_utc(cls, v):
        return naive_utc(v)

    @field_validator("status")
    @classmethod
    def not_born_cancelled(cls, v):
        if v == AppointmentStatus.CANCELLED:
            raise ValueError("New appointments cannot be created as cancelled")
        return v

class AppointmentStatusUpdate(CamelModel):
    status: AppointmentStatus

class AppointmentRead(CamelModel):
    id: int
    patient_id: int
    doctor_id: int
    appointment_date: datetime
    duration: int = 30
    status: AppointmentStatus
    reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

class AppointmentWithDetails(AppointmentRead):
    patient: PatientRead
    doctor: DoctorRead


# Organ donor schemas
class OrganDonorCreate(CamelModel):
    full_name: str = Field(min_length=1)
    blood_type: str
    organs: List[str] = Field(min_length=1)
    status: DonorStatus = DonorStatus.PENDING
    contact_phone: Optional[str] = None

    @field_validator("blood_type")
    @classmethod
    def check_blood_type(cls, v):
        if v not in BLOOD_TYPES:
            raise ValueError(f"Unknown blood type: {v}")
        return v

    @field_validator("organs")
    @classmethod
    def strip_organs(cls, v):
        organs = [organ.strip() for organ in v if organ.strip()]
        if not organs:
            raise ValueError("At least one organ is required")
        return organs

class DonorStatusUpdate(CamelModel):
    status: DonorStatus

class OrganDonorRead(CamelModel):
    id: int
    full_name: str
    blood_type: str
    organs: List[str]
    status: DonorStatus
    contact_phone: Optional[str] = None
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None


# Alert schemas
class AlertCreate(CamelModel):
    message: str = Field(min_length=1)
    severity: AlertSeverity = AlertSeverity.INFO

class AlertRead(CamelModel):
    id: int
    message: str
    severity: AlertSeverity
    is_read: bool
    created_at: Optional[datetime] = None


# Dashboard
class DashboardStats(CamelModel):
    available_beds: int
    occupied_beds: int
    today_appointments: int
    active_donors: int
    emergency_cases: int
    unread_alerts: int


# Chatbot schemas
class ChatbotMessageRequest(CamelModel):
    message: str = Field(min_length=1, max_length=2000)
    session_id: Optional[str] = None

class ChatbotMessageResponse(CamelModel):
    message: str
    timestamp: datetime
    session_id: Optional[str] = None

class ChatMessageRead(CamelModel):
    id: int
    session_id: str
    message: str
    is_user: bool
    timestamp: datetime

class Urgency(str, Enum):
    EMERGENCY = "emergency"
    URGENT = "urgent"
    NON_URGENT = "non_urgent"

class SymptomAnalysisRequest(CamelModel):
    symptoms: str = Field(min_length=1, max_length=2000)

class SymptomAnalysisResponse(CamelModel):
    diagnosis: str
    recommendations: List[str]
    urgency: Urgency
