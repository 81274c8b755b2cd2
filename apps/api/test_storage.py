"""Storage adapter against in-memory SQLite, and the availability gate"""
from datetime import date, datetime, time, timedelta
import asyncio
import socket

import pytest

from config import Settings
from conftest import unreachable_storage
from database import Connected, Unavailable, configure_storage, is_storage_available, to_async_url
from exceptions import InvalidTransition, StorageUnavailable, ValidationFailed
from models import AppointmentStatus, Bed, BedStatus, DonorStatus


async def seed_beds(storage):
    general = await storage.create_ward({"name": "General Ward", "capacity": 20})
    icu = await storage.create_ward({"name": "ICU", "capacity": 8})
    patient = await storage.create_patient({"first_name": "Jane", "last_name": "Smith"})
    beds = [
        await storage.create_bed({"ward_id": icu.id, "bed_number": "ICU-1"}),
        await storage.create_bed({"ward_id": general.id, "bed_number": "102"}),
        await storage.create_bed({"ward_id": general.id, "bed_number": "101"}),
    ]
    return general, icu, patient, beds


# ==================== GATE ====================

def test_missing_connection_string_trips_the_gate():
    storage = configure_storage(Settings(database_url=None))
    assert isinstance(storage, Unavailable)
    assert not is_storage_available(storage)


def test_connection_string_builds_an_engine():
    storage = configure_storage(Settings(database_url="sqlite://"))
    assert isinstance(storage, Connected)
    assert is_storage_available(storage)
    assert storage.engine.url.drivername == "sqlite+aiosqlite"


def test_sync_urls_are_mapped_to_async_drivers():
    assert to_async_url("postgresql://u:p@db:5432/hms") == "postgresql+asyncpg://u:p@db:5432/hms"
    assert to_async_url("postgres://u:p@db/hms") == "postgresql+asyncpg://u:p@db/hms"
    assert to_async_url("postgresql+asyncpg://db/hms") == "postgresql+asyncpg://db/hms"


async def test_every_operation_fails_fast_when_unavailable(offline_storage):
    assert not offline_storage.is_available
    with pytest.raises(StorageUnavailable):
        await offline_storage.get_all_doctors()
    with pytest.raises(StorageUnavailable):
        await offline_storage.create_doctor({"full_name": "Dr. X", "specialization": "X", "department": "X"})
    with pytest.raises(StorageUnavailable):
        await offline_storage.mark_alert_as_read(1)


@pytest.mark.parametrize("error", [
    socket.gaierror(-2, "Name or service not known"),
    ConnectionRefusedError(111, "Connection refused"),
    OSError("Multiple exceptions: [Errno 111] Connect call failed"),
    asyncio.TimeoutError(),
])
async def test_unreachable_database_raises_storage_unavailable(error):
    storage = unreachable_storage(error)
    assert storage.is_available
    with pytest.raises(StorageUnavailable):
        await storage.get_all_doctors()
    with pytest.raises(StorageUnavailable):
        await storage.create_alert({"message": "Generator test at noon"})
    assert await storage.ping() is False


async def test_ping_reaches_a_live_database(storage):
    assert await storage.ping() is True


# ==================== DOCTORS & PATIENTS ====================

async def test_doctors_are_alphabetical_and_filterable(storage):
    for name, dept in [("Dr. Sarah Wilson", "Cardiology"), ("Dr. Alex Chen", "Neurology"),
                       ("Dr. Bea Adams", "Cardiology")]:
        await storage.create_doctor({"full_name": name, "specialization": dept, "department": dept})

    assert [d.full_name for d in await storage.get_all_doctors()] == [
        "Dr. Alex Chen", "Dr. Bea Adams", "Dr. Sarah Wilson",
    ]
    assert [d.full_name for d in await storage.get_doctors_by_department("Cardiology")] == [
        "Dr. Bea Adams", "Dr. Sarah Wilson",
    ]


async def test_doctor_availability_update(storage):
    doctor = await storage.create_doctor({"full_name": "Dr. A", "specialization": "X", "department": "X"})
    updated = await storage.update_doctor_availability(doctor.id, False)
    assert updated.is_available is False
    assert await storage.update_doctor_availability(999, True) is None


async def test_patients_ordered_by_last_name_and_partially_updated(storage):
    await storage.create_patient({"first_name": "Mike", "last_name": "Johnson"})
    jane = await storage.create_patient({"first_name": "Jane", "last_name": "Doe", "room": "102"})
    assert [p.last_name for p in await storage.get_all_patients()] == ["Doe", "Johnson"]

    updated = await storage.update_patient(jane.id, {"condition": "Recovering"})
    assert updated.condition == "Recovering"
    assert updated.room == "102"


async def test_duplicate_unique_values_are_validation_errors(storage):
    await storage.create_ward({"name": "ICU", "capacity": 8})
    with pytest.raises(ValidationFailed):
        await storage.create_ward({"name": "ICU", "capacity": 4})


# ==================== BEDS ====================

async def test_bed_status_counts_partition_all_beds(storage):
    _, _, patient, beds = await seed_beds(storage)
    await storage.update_bed_status(beds[0].id, BedStatus.OCCUPIED, patient.id, True)

    available = await storage.get_beds_by_status(BedStatus.AVAILABLE)
    occupied = await storage.get_beds_by_status(BedStatus.OCCUPIED)
    assert len(available) + len(occupied) == len(await storage.get_all_beds())
    assert [b.bed_number for b in occupied] == ["ICU-1"]


async def test_bed_update_keeps_patient_reference_consistent(storage):
    _, _, patient, beds = await seed_beds(storage)
    bed = await storage.update_bed_status(beds[1].id, BedStatus.OCCUPIED, patient.id)
    assert bed.patient_id == patient.id

    freed = await storage.update_bed_status(beds[1].id, BedStatus.AVAILABLE)
    assert freed.patient_id is None
    assert freed.is_critical is False
    assert freed.last_updated >= bed.last_updated


async def test_bed_update_rejects_bad_occupancy(storage):
    _, _, _, beds = await seed_beds(storage)
    with pytest.raises(ValidationFailed):
        await storage.update_bed_status(beds[0].id, BedStatus.OCCUPIED, None)
    with pytest.raises(ValidationFailed):
        await storage.update_bed_status(beds[0].id, BedStatus.OCCUPIED, 999)


async def test_create_bed_requires_known_ward_and_unique_number(storage):
    general, _, _, _ = await seed_beds(storage)
    with pytest.raises(ValidationFailed):
        await storage.create_bed({"ward_id": 999, "bed_number": "1"})
    with pytest.raises(ValidationFailed):
        await storage.create_bed({"ward_id": general.id, "bed_number": "101"})


async def test_bed_numbers_are_unique_per_ward_in_the_schema(storage):
    general, icu, _, _ = await seed_beds(storage)
    with pytest.raises(ValidationFailed):
        await storage._add(Bed(ward_id=general.id, bed_number="101"))

    bed = await storage.create_bed({"ward_id": icu.id, "bed_number": "101"})
    assert bed.ward_id == icu.id


async def test_beds_with_ward_info_are_joined_and_ordered(storage):
    await seed_beds(storage)
    rows = await storage.get_beds_with_ward_info()
    assert [(r["ward"]["name"], r["bed_number"]) for r in rows] == [
        ("General Ward", "101"), ("General Ward", "102"), ("ICU", "ICU-1"),
    ]


async def test_beds_by_ward(storage):
    general, _, _, _ = await seed_beds(storage)
    assert [b.bed_number for b in await storage.get_beds_by_ward(general.id)] == ["101", "102"]


# ==================== APPOINTMENTS ====================

async def seed_appointments(storage, day: date):
    patient = await storage.create_patient({"first_name": "John", "last_name": "Doe"})
    doctor = await storage.create_doctor({"full_name": "Dr. A", "specialization": "X", "department": "X"})
    for when in [datetime.combine(day, time(15, 0)), datetime.combine(day, time(9, 0)),
                 datetime.combine(day + timedelta(days=1), time(9, 0))]:
        await storage.create_appointment({"patient_id": patient.id, "doctor_id": doctor.id,
                                          "appointment_date": when})
    return patient, doctor


async def test_appointments_by_date_are_that_day_ascending(storage):
    day = date(2025, 3, 3)
    await seed_appointments(storage, day)
    rows = await storage.get_appointments_by_date(day)
    assert [a.appointment_date.hour for a in rows] == [9, 15]


async def test_appointments_with_details_join_patient_and_doctor(storage):
    await seed_appointments(storage, date(2025, 3, 3))
    rows = await storage.get_appointments_with_details()
    assert len(rows) == 3
    assert rows[0]["appointment_date"] > rows[-1]["appointment_date"]
    assert rows[0]["patient"]["last_name"] == "Doe"
    assert rows[0]["doctor"]["full_name"] == "Dr. A"


async def test_appointment_requires_existing_patient_and_doctor(storage):
    with pytest.raises(ValidationFailed):
        await storage.create_appointment({"patient_id": 1, "doctor_id": 1,
                                          "appointment_date": datetime(2025, 1, 1, 9)})


async def test_appointment_status_only_moves_forward(storage):
    patient, doctor = await seed_appointments(storage, date(2025, 3, 3))
    appointment = (await storage.get_appointments_by_doctor(doctor.id))[0]

    confirmed = await storage.update_appointment_status(appointment.id, AppointmentStatus.CONFIRMED)
    assert confirmed.status == AppointmentStatus.CONFIRMED
    with pytest.raises(InvalidTransition):
        await storage.update_appointment_status(appointment.id, AppointmentStatus.SCHEDULED)
    assert (await storage.get_appointment(appointment.id)).status == AppointmentStatus.CONFIRMED
    assert len(await storage.get_appointments_by_patient(patient.id)) == 3


# ==================== DONORS ====================

async def seed_donors(storage):
    for name, blood, organs in [
        ("Robert Brown", "O+", ["Kidney"]),
        ("Lisa Wang", "A-", ["Liver", "Cornea"]),
        ("David Okafor", "O+", ["Heart", "Kidney"]),
        ("Ana Ruiz", "O+", ["Liver"]),
    ]:
        await storage.create_organ_donor({"full_name": name, "blood_type": blood, "organs": organs})


async def test_donor_search_blood_exact_organ_substring(storage):
    await seed_donors(storage)
    donors = await storage.search_organ_donors(blood_type="O+", organ_type="kidney")
    assert sorted(d.full_name for d in donors) == ["David Okafor", "Robert Brown"]
    for donor in donors:
        assert donor.blood_type == "O+"
        assert any("kidney" in organ.lower() for organ in donor.organs)

    assert await storage.search_organ_donors(blood_type="o+") == []
    assert [d.full_name for d in await storage.get_organ_donors_by_type("CORN")] == ["Lisa Wang"]
    assert len(await storage.get_organ_donors_by_blood_type("O+")) == 3
    assert len(await storage.get_all_organ_donors()) == 4


async def test_donor_status_update_touches_last_updated(storage):
    await seed_donors(storage)
    donor = (await storage.get_organ_donors_by_blood_type("A-"))[0]
    updated = await storage.update_organ_donor_status(donor.id, DonorStatus.AVAILABLE)
    assert updated.status == DonorStatus.AVAILABLE
    assert updated.last_updated >= donor.last_updated
    assert (await storage.get_all_organ_donors())[0].id == donor.id


# ==================== ALERTS & CHAT ====================

async def test_marking_an_alert_read_is_idempotent(storage):
    alert = await storage.create_alert({"message": "ICU bed available"})
    assert [a.id for a in await storage.get_unread_alerts()] == [alert.id]

    first = await storage.mark_alert_as_read(alert.id)
    second = await storage.mark_alert_as_read(alert.id)
    assert first.is_read is True
    assert second.is_read is True
    assert await storage.get_unread_alerts() == []
    assert await storage.mark_alert_as_read(999) is None


async def test_chat_messages_are_per_session_in_order(storage):
    await storage.create_chat_message("s1", "hello", True)
    await storage.create_chat_message("s2", "other", True)
    await storage.create_chat_message("s1", "Hello! How can I help?", False)

    messages = await storage.get_chat_messages("s1")
    assert [(m.message, m.is_user) for m in messages] == [("hello", True), ("Hello! How can I help?", False)]


# ==================== DASHBOARD ====================

async def test_dashboard_stats_count_current_state(storage):
    _, _, patient, beds = await seed_beds(storage)
    await storage.update_bed_status(beds[0].id, BedStatus.OCCUPIED, patient.id, True)
    today = date(2025, 3, 3)
    await seed_appointments(storage, today)
    await seed_donors(storage)
    donor = (await storage.get_organ_donors_by_blood_type("A-"))[0]
    await storage.update_organ_donor_status(donor.id, DonorStatus.AVAILABLE)
    await storage.create_alert({"message": "Check ICU-1", "severity": "critical"})

    assert await storage.dashboard_stats(today) == {
        "available_beds": 2,
        "occupied_beds": 1,
        "today_appointments": 2,
        "active_donors": 1,
        "emergency_cases": 1,
        "unread_alerts": 1,
    }
