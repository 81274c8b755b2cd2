"""Record filters shared by the database and mock code paths"""
from typing import Iterable, Optional


def organ_matches(organs: Iterable[str], organ_type: Optional[str]) -> bool:
    """Case-insensitive substring match of ``organ_type`` against any listed organ"""
    if not organ_type:
        return True
    needle = organ_type.lower()
    return any(needle in organ.lower() for organ in organs)


def blood_type_matches(blood_type: str, wanted: Optional[str]) -> bool:
    """Blood type is an exact, case-sensitive match"""
    if not wanted:
        return True
    return blood_type == wanted


def donor_matches(donor, blood_type: Optional[str] = None, organ_type: Optional[str] = None) -> bool:
    """Works on both mapping records (mock data) and ORM rows"""
    if isinstance(donor, dict):
        donor_blood, organs = donor["blood_type"], donor["organs"]
    else:
        donor_blood, organs = donor.blood_type, donor.organs
    return blood_type_matches(donor_blood, blood_type) and organ_matches(organs or [], organ_type)
