"""
Static sample records served when the database cannot be reached.

Every function is pure: it returns fresh copies of fixed records, shaped like
the corresponding response schema, and applies the same filters as the real
query. None of this data is synchronized with the database.
"""
from copy import deepcopy
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from services.filters import donor_matches

Record = Dict[str, Any]

# Fixed reference day for "today" queries against mock data
MOCK_TODAY = date(2024, 1, 15)
_CREATED = datetime(2024, 1, 1, 8, 0, 0)

DOCTORS: List[Record] = [
    {"id": 1, "full_name": "Dr. Sarah Wilson", "specialization": "Interventional Cardiology",
     "department": "Cardiology", "license_number": "MD-10231", "phone_number": "555-0101",
     "is_available": True, "working_hours": "08:00-16:00", "created_at": _CREATED},
    {"id": 2, "full_name": "Dr. Alex Chen", "specialization": "Neurology",
     "department": "Neurology", "license_number": "MD-10877", "phone_number": "555-0102",
     "is_available": True, "working_hours": "09:00-17:00", "created_at": _CREATED},
    {"id": 3, "full_name": "Dr. Maria Garcia", "specialization": "Pediatric Medicine",
     "department": "Pediatrics", "license_number": "MD-11402", "phone_number": "555-0103",
     "is_available": False, "working_hours": "10:00-18:00", "created_at": _CREATED},
]

PATIENTS: List[Record] = [
    {"id": 1, "first_name": "John", "last_name": "Doe", "email": "john.doe@example.com",
     "phone_number": "555-0201", "date_of_birth": datetime(1978, 6, 2), "blood_type": "O+",
     "address": "12 Elm Street", "emergency_contact_name": "Mary Doe",
     "emergency_contact_phone": "555-0211", "condition": "Stable", "room": None,
     "medical_history": "Hypertension", "created_at": _CREATED},
    {"id": 2, "first_name": "Jane", "last_name": "Smith", "email": "jane.smith@example.com",
     "phone_number": "555-0202", "date_of_birth": datetime(1991, 11, 23), "blood_type": "A-",
     "address": "4 Oak Avenue", "emergency_contact_name": "Tom Smith",
     "emergency_contact_phone": "555-0212", "condition": "Recovering", "room": "102",
     "medical_history": "Appendectomy", "created_at": _CREATED},
    {"id": 3, "first_name": "Mike", "last_name": "Johnson", "email": None,
     "phone_number": "555-0203", "date_of_birth": datetime(1955, 3, 14), "blood_type": "B+",
     "address": "88 Pine Road", "emergency_contact_name": "Anna Johnson",
     "emergency_contact_phone": "555-0213", "condition": "Critical", "room": "ICU-1",
     "medical_history": "Coronary artery disease", "created_at": _CREATED},
]

WARDS: List[Record] = [
    {"id": 1, "name": "General Ward", "department": "General Medicine", "capacity": 20, "created_at": _CREATED},
    {"id": 2, "name": "ICU", "department": "Critical Care", "capacity": 8, "created_at": _CREATED},
    {"id": 3, "name": "Pediatrics", "department": "Pediatrics", "capacity": 12, "created_at": _CREATED},
]

BEDS: List[Record] = [
    {"id": 1, "ward_id": 1, "bed_number": "101", "status": "available", "is_critical": False,
     "patient_id": None, "equipment": None, "notes": None, "last_updated": datetime(2024, 1, 15, 7, 30)},
    {"id": 2, "ward_id": 1, "bed_number": "102", "status": "occupied", "is_critical": False,
     "patient_id": 2, "equipment": None, "notes": None, "last_updated": datetime(2024, 1, 14, 16, 5)},
    {"id": 3, "ward_id": 2, "bed_number": "ICU-1", "status": "occupied", "is_critical": True,
     "patient_id": 3, "equipment": "Ventilator, cardiac monitor", "notes": "Post-op observation",
     "last_updated": datetime(2024, 1, 15, 6, 45)},
    {"id": 4, "ward_id": 2, "bed_number": "ICU-2", "status": "available", "is_critical": False,
     "patient_id": None, "equipment": "Cardiac monitor", "notes": None,
     "last_updated": datetime(2024, 1, 13, 12, 0)},
]

APPOINTMENTS: List[Record] = [
    {"id": 1, "patient_id": 1, "doctor_id": 1, "appointment_date": datetime(2024, 1, 15, 10, 0),
     "duration": 30, "status": "scheduled", "reason": "Blood pressure review", "notes": None,
     "created_at": _CREATED},
    {"id": 2, "patient_id": 2, "doctor_id": 2, "appointment_date": datetime(2024, 1, 15, 11, 30),
     "duration": 45, "status": "confirmed", "reason": "Post-surgery follow-up", "notes": None,
     "created_at": _CREATED},
    {"id": 3, "patient_id": 3, "doctor_id": 1, "appointment_date": datetime(2024, 1, 16, 9, 0),
     "duration": 60, "status": "pending", "reason": "Cardiac assessment", "notes": "Transfer from ICU",
     "created_at": _CREATED},
]

ORGAN_DONORS: List[Record] = [
    {"id": 3, "full_name": "David Okafor", "blood_type": "O+", "organs": ["Heart", "Kidney"],
     "status": "matched", "contact_phone": "555-0303", "created_at": _CREATED,
     "last_updated": datetime(2024, 1, 14, 9, 0)},
    {"id": 1, "full_name": "Robert Brown", "blood_type": "O+", "organs": ["Kidney"],
     "status": "available", "contact_phone": "555-0301", "created_at": _CREATED,
     "last_updated": datetime(2024, 1, 12, 15, 0)},
    {"id": 2, "full_name": "Lisa Wang", "blood_type": "A-", "organs": ["Liver", "Cornea"],
     "status": "pending", "contact_phone": "555-0302", "created_at": _CREATED,
     "last_updated": datetime(2024, 1, 10, 11, 0)},
]

ALERTS: List[Record] = [
    {"id": 2, "message": "Patient in room 102 needs attention", "severity": "warning",
     "is_read": False, "created_at": datetime(2024, 1, 15, 8, 15)},
    {"id": 1, "message": "ICU bed available", "severity": "info",
     "is_read": True, "created_at": datetime(2024, 1, 15, 7, 30)},
]


def _find(records: List[Record], record_id: int) -> Optional[Record]:
    for record in records:
        if record["id"] == record_id:
            return deepcopy(record)
    return None


# Doctors

def mock_doctors(department: Optional[str] = None) -> List[Record]:
    doctors = [d for d in DOCTORS if department is None or d["department"] == department]
    return deepcopy(sorted(doctors, key=lambda d: (d["full_name"], d["id"])))

def mock_doctor(doctor_id: int) -> Optional[Record]:
    return _find(DOCTORS, doctor_id)


# Patients

def mock_patients() -> List[Record]:
    return deepcopy(sorted(PATIENTS, key=lambda p: (p["last_name"], p["first_name"], p["id"])))

def mock_patient(patient_id: int) -> Optional[Record]:
    return _find(PATIENTS, patient_id)


# Wards and beds

def mock_wards() -> List[Record]:
    return deepcopy(sorted(WARDS, key=lambda w: w["name"]))

def mock_ward(ward_id: int) -> Optional[Record]:
    return _find(WARDS, ward_id)

def mock_beds(status: Optional[str] = None, ward_id: Optional[int] = None) -> List[Record]:
    beds = [
        b for b in BEDS
        if (status is None or b["status"] == status) and (ward_id is None or b["ward_id"] == ward_id)
    ]
    return deepcopy(sorted(beds, key=lambda b: (b["bed_number"], b["id"])))

def mock_bed(bed_id: int) -> Optional[Record]:
    return _find(BEDS, bed_id)

def mock_beds_with_ward(status: Optional[str] = None) -> List[Record]:
    wards = {w["id"]: w for w in WARDS}
    rows = [{**bed, "ward": deepcopy(wards[bed["ward_id"]])} for bed in mock_beds(status=status)]
    return sorted(rows, key=lambda r: (r["ward"]["name"], r["bed_number"], r["id"]))


# Appointments

def mock_appointments(
    doctor_id: Optional[int] = None,
    patient_id: Optional[int] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> List[Record]:
    rows = [
        a for a in APPOINTMENTS
        if (doctor_id is None or a["doctor_id"] == doctor_id)
        and (patient_id is None or a["patient_id"] == patient_id)
        and (start is None or a["appointment_date"] >= start)
        and (end is None or a["appointment_date"] < end)
    ]
    # Range queries read forward in time, plain listings newest first
    ranged = start is not None or end is not None
    return deepcopy(sorted(rows, key=lambda a: a["appointment_date"], reverse=not ranged))

def mock_appointments_by_date(day: date) -> List[Record]:
    return deepcopy(sorted(
        (a for a in APPOINTMENTS if a["appointment_date"].date() == day),
        key=lambda a: a["appointment_date"],
    ))

def mock_appointment(appointment_id: int) -> Optional[Record]:
    return _find(APPOINTMENTS, appointment_id)

def mock_appointments_with_details() -> List[Record]:
    patients = {p["id"]: p for p in PATIENTS}
    doctors = {d["id"]: d for d in DOCTORS}
    return [
        {**a, "patient": deepcopy(patients[a["patient_id"]]), "doctor": deepcopy(doctors[a["doctor_id"]])}
        for a in mock_appointments()
    ]


# Organ donors

def mock_organ_donors(blood_type: Optional[str] = None, organ_type: Optional[str] = None) -> List[Record]:
    donors = [d for d in ORGAN_DONORS if donor_matches(d, blood_type, organ_type)]
    return deepcopy(sorted(donors, key=lambda d: (d["last_updated"], d["id"]), reverse=True))

def mock_organ_donor(donor_id: int) -> Optional[Record]:
    return _find(ORGAN_DONORS, donor_id)


# Alerts

def mock_alerts(unread_only: bool = False) -> List[Record]:
    alerts = [a for a in ALERTS if not (unread_only and a["is_read"])]
    return deepcopy(sorted(alerts, key=lambda a: (a["created_at"], a["id"]), reverse=True))


# Chat

def mock_chat_messages(session_id: str) -> List[Record]:
    """Chat history is never faked"""
    return []


# Dashboard

def mock_dashboard_stats() -> Dict[str, int]:
    return {
        "available_beds": len(mock_beds(status="available")),
        "occupied_beds": len(mock_beds(status="occupied")),
        "today_appointments": sum(
            1 for a in mock_appointments_by_date(MOCK_TODAY) if a["status"] != "cancelled"
        ),
        "active_donors": sum(1 for d in ORGAN_DONORS if d["status"] == "available"),
        "emergency_cases": sum(1 for b in BEDS if b["status"] == "occupied" and b["is_critical"]),
        "unread_alerts": len(mock_alerts(unread_only=True)),
    }
