from datetime import date
from typing import Iterable, List, Optional

from .models import Beneficiary


def normalize_text(s: str) -> str:
    return " ".join(s.strip().lower().split())


def filter_beneficiaries(
    beneficiaries: Iterable[Beneficiary],
    name: str = "",
    phone: str = "",
    created_on: Optional[date] = None,
) -> List[Beneficiary]:
    """
    Returns the beneficiaries matching every given filter, in input order.
    name: case-insensitive substring of the full name.
    phone: substring of the phone number, as typed.
    created_on: registration date (calendar day of created_at).
    Empty filters match everything.
    """
    name_part = normalize_text(name) if name else ""
    phone_part = phone.strip()

    result: List[Beneficiary] = []
    for b in beneficiaries:
        if name_part and name_part not in normalize_text(b.full_name):
            continue
        if phone_part and phone_part not in b.phone_number:
            continue
        if created_on is not None and b.created_at.date() != created_on:
            continue
        result.append(b)
    return result
