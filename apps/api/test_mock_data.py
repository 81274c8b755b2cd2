"""Mock fallback data: filters, determinism and invariants"""
from datetime import datetime

from services import mock_data


def test_donor_search_matches_blood_type_exactly_and_organ_loosely():
    donors = mock_data.mock_organ_donors(blood_type="O+", organ_type="kidney")
    assert [d["id"] for d in donors] == [3, 1]
    for donor in donors:
        assert donor["blood_type"] == "O+"
        assert any("kidney" in organ.lower() for organ in donor["organs"])


def test_organ_match_is_case_insensitive_substring():
    assert [d["id"] for d in mock_data.mock_organ_donors(organ_type="KID")] == [3, 1]
    assert [d["id"] for d in mock_data.mock_organ_donors(organ_type="corn")] == [2]


def test_blood_type_match_is_case_sensitive():
    assert mock_data.mock_organ_donors(blood_type="a-") == []
    assert [d["id"] for d in mock_data.mock_organ_donors(blood_type="A-")] == [2]


def test_donors_are_newest_first():
    updated = [d["last_updated"] for d in mock_data.mock_organ_donors()]
    assert updated == sorted(updated, reverse=True)


def test_results_are_deterministic_copies():
    first = mock_data.mock_beds()
    first[0]["status"] = "occupied"
    assert mock_data.mock_beds() != first
    assert mock_data.mock_beds() == mock_data.mock_beds()


def test_bed_statuses_partition_all_beds():
    available = mock_data.mock_beds(status="available")
    occupied = mock_data.mock_beds(status="occupied")
    assert len(available) + len(occupied) == len(mock_data.mock_beds())


def test_bed_patient_reference_present_iff_occupied():
    for bed in mock_data.mock_beds():
        assert (bed["patient_id"] is not None) == (bed["status"] == "occupied")
        if bed["is_critical"]:
            assert bed["status"] == "occupied"


def test_beds_with_ward_are_grouped_by_ward_name():
    rows = mock_data.mock_beds_with_ward()
    assert [(r["ward"]["name"], r["bed_number"]) for r in rows] == [
        ("General Ward", "101"), ("General Ward", "102"), ("ICU", "ICU-1"), ("ICU", "ICU-2"),
    ]


def test_doctor_department_filter_and_order():
    assert [d["full_name"] for d in mock_data.mock_doctors()] == [
        "Dr. Alex Chen", "Dr. Maria Garcia", "Dr. Sarah Wilson",
    ]
    assert [d["id"] for d in mock_data.mock_doctors(department="Neurology")] == [2]


def test_appointments_by_date_are_ascending_and_same_day():
    rows = mock_data.mock_appointments_by_date(mock_data.MOCK_TODAY)
    assert [a["id"] for a in rows] == [1, 2]
    assert all(a["appointment_date"].date() == mock_data.MOCK_TODAY for a in rows)


def test_appointment_range_is_half_open():
    rows = mock_data.mock_appointments(start=datetime(2024, 1, 15, 11, 30), end=datetime(2024, 1, 16, 9, 0))
    assert [a["id"] for a in rows] == [2]


def test_appointments_with_details_embed_patient_and_doctor():
    first = mock_data.mock_appointments_with_details()[0]
    assert first["id"] == 3
    assert first["patient"]["last_name"] == "Johnson"
    assert first["doctor"]["full_name"] == "Dr. Sarah Wilson"


def test_unread_alerts():
    assert [a["id"] for a in mock_data.mock_alerts(unread_only=True)] == [2]


def test_unknown_ids_return_none():
    assert mock_data.mock_doctor(99) is None
    assert mock_data.mock_bed(99) is None


def test_dashboard_stats_follow_mock_records():
    assert mock_data.mock_dashboard_stats() == {
        "available_beds": 2,
        "occupied_beds": 2,
        "today_appointments": 2,
        "active_donors": 1,
        "emergency_cases": 1,
        "unread_alerts": 1,
    }
