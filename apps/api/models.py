from typing import Optional, List
from datetime import datetime
from sqlmodel import Field, SQLModel
from sqlalchemy import Column, JSON, UniqueConstraint
from enum import Enum


class BedStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"

class AppointmentStatus(str, Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

class DonorStatus(str, Enum):
    AVAILABLE = "available"
    MATCHED = "matched"
    PENDING = "pending"

class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class Doctor(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str = Field(index=True)
    specialization: str
    department: str = Field(index=True)
    license_number: Optional[str] = Field(default=None, unique=True)
    phone_number: Optional[str] = None
    is_available: bool = Field(default=True)
    working_hours: Optional[str] = None  # e.g. "09:00-17:00"
    created_at: datetime = Field(default_factory=datetime.utcnow)

class Patient(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    first_name: str
    last_name: str = Field(index=True)
    email: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    blood_type: Optional[str] = None
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    condition: Optional[str] = None  # Stable, Recovering, Critical, ...
    room: Optional[str] = None
    medical_history: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

class Ward(SQLModel, table=True):
    """Hospital ward"""
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    department: Optional[str] = None
    capacity: int = Field(ge=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)

class Bed(SQLModel, table=True):
    """Hospital bed; patient_id is set iff the bed is occupied"""
    __table_args__ = (UniqueConstraint("ward_id", "bed_number"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    ward_id: int = Field(foreign_key="ward.id", index=True)
    bed_number: str = Field(index=True)
    status: BedStatus = Field(default=BedStatus.AVAILABLE, index=True)
    is_critical: bool = Field(default=False)  # ICU / critical-care occupant
    patient_id: Optional[int] = Field(default=None, foreign_key="patient.id")
    equipment: Optional[str] = None
    notes: Optional[str] = None
    last_updated: datetime = Field(default_factory=datetime.utcnow)

class Appointment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    patient_id: int = Field(foreign_key="patient.id", index=True)
    doctor_id: int = Field(foreign_key="doctor.id", index=True)
    appointment_date: datetime = Field(index=True)
    duration: int = Field(default=30)  # minutes
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED)
    reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

class OrganDonor(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str
    blood_type: str = Field(index=True)
    organs: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    status: DonorStatus = Field(default=DonorStatus.PENDING)
    contact_phone: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    last_updated: datetime = Field(default_factory=datetime.utcnow, index=True)

class Alert(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    message: str
    severity: AlertSeverity = Field(default=AlertSeverity.INFO)
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)

class ChatMessage(SQLModel, table=True):
    """Chatbot conversation turn"""
    id: Optional[int] = Field(default=None, primary_key=True)
    session_id: str = Field(index=True)
    message: str
    is_user: bool
    timestamp: datetime = Field(default_factory=datetime.utcnow, index=True)
