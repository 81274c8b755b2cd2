"""Status lifecycle rules for beds, appointments and organ donors"""
from typing import Dict, FrozenSet, Optional
from models import AppointmentStatus, BedStatus, DonorStatus
from exceptions import InvalidTransition, ValidationFailed


APPOINTMENT_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.PENDING: frozenset({
        AppointmentStatus.SCHEDULED,
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.SCHEDULED: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.CONFIRMED: frozenset({AppointmentStatus.CANCELLED}),
    AppointmentStatus.CANCELLED: frozenset(),
}

DONOR_TRANSITIONS: Dict[DonorStatus, FrozenSet[DonorStatus]] = {
    DonorStatus.PENDING: frozenset({DonorStatus.AVAILABLE, DonorStatus.MATCHED}),
    DonorStatus.AVAILABLE: frozenset({DonorStatus.MATCHED, DonorStatus.PENDING}),
    DonorStatus.MATCHED: frozenset(),
}


def validate_appointment_transition(current: AppointmentStatus, requested: AppointmentStatus) -> None:
    """Appointments only move forward; re-applying the current status is allowed"""
    current = AppointmentStatus(current)
    requested = AppointmentStatus(requested)
    if requested == current:
        return
    if requested not in APPOINTMENT_TRANSITIONS[current]:
        raise InvalidTransition("appointment", current.value, requested.value)


def validate_donor_transition(current: DonorStatus, requested: DonorStatus) -> None:
    current = DonorStatus(current)
    requested = DonorStatus(requested)
    if requested == current:
        return
    if requested not in DONOR_TRANSITIONS[current]:
        raise InvalidTransition("organ donor", current.value, requested.value)


def validate_bed_update(status: BedStatus, patient_id: Optional[int], is_critical: bool) -> None:
    """
    A bed carries a patient iff it is occupied. The critical flag only applies
    to an occupied bed.
    """
    status = BedStatus(status)
    if status == BedStatus.OCCUPIED and patient_id is None:
        raise ValidationFailed("An occupied bed requires a patientId")
    if status == BedStatus.AVAILABLE and patient_id is not None:
        raise ValidationFailed("An available bed cannot have a patientId")
    if status == BedStatus.AVAILABLE and is_critical:
        raise ValidationFailed("Only an occupied bed can be flagged critical")
