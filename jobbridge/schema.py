import re
from datetime import date, datetime
from typing import Any, Dict, List

from .models import SKILL_CATALOG, JobCategory, JobStatus

MIN_PHONE_LENGTH = 10

BENEFICIARY_REQUIRED_FIELDS = ["full_name", "phone_number"]
BENEFICIARY_OPTIONAL_FIELDS = [
    "email",
    "address",
    "date_of_birth",
    "gender",
    "education",
    "experience",
]

PROVIDER_REQUIRED_FIELDS = ["company_name", "contact_person", "phone_number", "email"]
PROVIDER_OPTIONAL_FIELDS = ["address", "industry"]

JOB_REQUIRED_FIELDS = ["provider_id", "title", "category", "description"]
JOB_OPTIONAL_FIELDS = ["location", "salary_range"]

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_email(v: str) -> bool:
    return bool(_EMAIL_RE.match(v.strip()))


def _valid_iso_date(v: str) -> bool:
    try:
        date.fromisoformat(v.strip())
        return True
    except ValueError:
        return False


def _check_created_at(data: Dict[str, Any], errors: List[str]) -> None:
    # Optional on intake; when given it must parse as an ISO timestamp
    value = data.get("created_at")
    if value is None or isinstance(value, datetime):
        return
    if not isinstance(value, str):
        errors.append("Field 'created_at' must be an ISO timestamp string if provided")
        return
    if not value.strip():
        return
    try:
        datetime.fromisoformat(value.strip())
    except ValueError:
        errors.append("Field 'created_at' must be an ISO timestamp (YYYY-MM-DDTHH:MM:SS)")


def _check_required(data: Dict[str, Any], fields: List[str], errors: List[str]) -> None:
    for f in fields:
        if f not in data or data[f] is None:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")


def _check_optional(data: Dict[str, Any], fields: List[str], errors: List[str]) -> None:
    # None and "" both mean "not provided"
    for f in fields:
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")


def _check_phone(data: Dict[str, Any], errors: List[str]) -> None:
    phone = data.get("phone_number")
    if _is_non_empty_str(phone) and len(phone.strip()) < MIN_PHONE_LENGTH:
        errors.append(f"Field 'phone_number' must have at least {MIN_PHONE_LENGTH} characters")


def _check_skills(data: Dict[str, Any], field: str, strict: bool, errors: List[str]) -> None:
    skills = data.get(field)
    if not isinstance(skills, list) or not skills:
        errors.append(f"Field '{field}' must be a non-empty list of skill labels")
        return
    if not all(_is_non_empty_str(s) for s in skills):
        errors.append(f"Field '{field}' must only contain non-empty strings")
        return
    if strict:
        unknown = [s for s in skills if s not in SKILL_CATALOG]
        if unknown:
            errors.append(f"Field '{field}' has unknown skills: {', '.join(unknown)}")


def validate_beneficiary(data: Dict[str, Any], strict: bool = False) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.

    strict: also require every skill to come from the intake skill catalog.
    """
    errors: List[str] = []
    _check_required(data, BENEFICIARY_REQUIRED_FIELDS, errors)
    _check_optional(data, BENEFICIARY_OPTIONAL_FIELDS, errors)
    _check_phone(data, errors)
    _check_skills(data, "skills", strict, errors)
    _check_created_at(data, errors)

    # Email and date of birth are optional, but must be well-formed when given
    if _is_non_empty_str(data.get("email")) and not _valid_email(data["email"]):
        errors.append("Field 'email' must be a valid email address")
    if _is_non_empty_str(data.get("date_of_birth")) and not _valid_iso_date(data["date_of_birth"]):
        errors.append("Field 'date_of_birth' must be a date in YYYY-MM-DD format")

    attachments = data.get("attachments")
    if attachments is not None and (
        not isinstance(attachments, list) or not all(_is_non_empty_str(a) for a in attachments)
    ):
        errors.append("Field 'attachments' must be a list of reference strings")

    return errors


def validate_provider(data: Dict[str, Any]) -> List[str]:
    """Returns a list of validation error messages. Empty list means valid."""
    errors: List[str] = []
    _check_required(data, PROVIDER_REQUIRED_FIELDS, errors)
    _check_optional(data, PROVIDER_OPTIONAL_FIELDS, errors)
    _check_phone(data, errors)
    _check_created_at(data, errors)
    if _is_non_empty_str(data.get("email")) and not _valid_email(data["email"]):
        errors.append("Field 'email' must be a valid email address")
    return errors


def validate_job(data: Dict[str, Any], strict: bool = False) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Does not check that the provider exists; that needs the record store.
    """
    errors: List[str] = []
    _check_required(data, JOB_REQUIRED_FIELDS, errors)
    _check_optional(data, JOB_OPTIONAL_FIELDS, errors)
    _check_skills(data, "required_skills", strict, errors)
    _check_created_at(data, errors)

    categories = {c.value for c in JobCategory}
    if _is_non_empty_str(data.get("category")) and data["category"] not in categories:
        errors.append(f"Field 'category' must be one of: {', '.join(sorted(categories))}")

    openings = data.get("openings", 1)
    # bool is an int subclass; reject it explicitly
    if isinstance(openings, bool) or not isinstance(openings, int) or openings < 1:
        errors.append("Field 'openings' must be an integer of at least 1")

    status = data.get("status")
    statuses = {s.value for s in JobStatus}
    if status is not None and (not isinstance(status, str) or status not in statuses):
        errors.append(f"Field 'status' must be one of: {', '.join(sorted(statuses))}")

    return errors
