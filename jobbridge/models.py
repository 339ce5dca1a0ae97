"""
Core data models for beneficiaries, providers, jobs and matches.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple
import uuid


def _new_id() -> str:
    return str(uuid.uuid4())


def _optional_str(value: Any) -> Optional[str]:
    """Empty form fields are stored as None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    value = _optional_str(value)
    if value is None:
        return datetime.now()
    return datetime.fromisoformat(value)


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    value = _optional_str(value)
    if value is None:
        return None
    return date.fromisoformat(value)


class JobStatus(Enum):
    """Lifecycle state of a job opening."""
    ACTIVE = "active"
    CLOSED = "closed"


class JobCategory(Enum):
    """Fixed set of job categories offered at intake."""
    CONSTRUCTION_LABOR = "construction_labor"
    DOMESTIC_HOUSEKEEPING = "domestic_housekeeping"
    MANUFACTURING_PRODUCTION = "manufacturing_production"
    RETAIL_FOOD_SERVICES = "retail_food_services"
    LOGISTICS_DELIVERY = "logistics_delivery"
    SECURITY_AUXILIARY = "security_auxiliary"
    AGRICULTURE_FARMING = "agriculture_farming"
    WASTE_MANAGEMENT = "waste_management"
    PATIENT_CARE = "patient_care"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS = {
    JobCategory.CONSTRUCTION_LABOR: "Construction & Labor",
    JobCategory.DOMESTIC_HOUSEKEEPING: "Domestic & Housekeeping",
    JobCategory.MANUFACTURING_PRODUCTION: "Manufacturing & Production",
    JobCategory.RETAIL_FOOD_SERVICES: "Retail & Food Services",
    JobCategory.LOGISTICS_DELIVERY: "Logistics & Delivery",
    JobCategory.SECURITY_AUXILIARY: "Security & Auxiliary",
    JobCategory.AGRICULTURE_FARMING: "Agriculture & Farming",
    JobCategory.WASTE_MANAGEMENT: "Waste Management",
    JobCategory.PATIENT_CARE: "Patient Care",
}

# Skill labels offered by the intake forms.
SKILL_CATALOG = (
    "Plumbing",
    "Carpenter",
    "Electrician",
    "Security Guard",
    "Maid",
    "Cook",
)


class SkillSet:
    """
    Immutable ordered set of skill labels.

    Duplicates are dropped on construction, keeping the first occurrence.
    Labels are compared exactly: "Plumbing" and "plumbing" are different skills.
    """

    __slots__ = ("_labels", "_lookup")

    def __init__(self, labels: Iterable[str] = ()):
        ordered = tuple(dict.fromkeys(labels))
        object.__setattr__(self, "_labels", ordered)
        object.__setattr__(self, "_lookup", frozenset(ordered))

    def __setattr__(self, name, value):
        raise AttributeError("SkillSet is immutable")

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, label: object) -> bool:
        return label in self._lookup

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SkillSet):
            return self._labels == other._labels
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._labels)

    def __repr__(self) -> str:
        return f"SkillSet({list(self._labels)!r})"

    def intersection(self, other: Iterable[str]) -> Tuple[str, ...]:
        """Labels of this set also present in ``other``, in this set's order."""
        if not isinstance(other, SkillSet):
            other = SkillSet(other)
        return tuple(label for label in self._labels if label in other)

    def issuperset(self, other: Iterable[str]) -> bool:
        return all(label in self._lookup for label in other)

    def to_list(self) -> list[str]:
        return list(self._labels)


@dataclass(frozen=True)
class Beneficiary:
    """A person seeking employment, registered with a skill set."""
    full_name: str
    phone_number: str
    skills: SkillSet = field(default_factory=SkillSet)
    id: str = field(default_factory=_new_id)
    email: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    education: Optional[str] = None
    experience: Optional[str] = None
    attachments: Tuple[str, ...] = ()
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not isinstance(self.skills, SkillSet):
            object.__setattr__(self, "skills", SkillSet(self.skills))
        object.__setattr__(self, "attachments", tuple(self.attachments))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Beneficiary":
        """Build from intake data. Raises ValueError on an unparseable date."""
        kwargs = {
            "full_name": str(data["full_name"]).strip(),
            "phone_number": str(data["phone_number"]).strip(),
            "skills": SkillSet(data.get("skills") or ()),
            "email": _optional_str(data.get("email")),
            "address": _optional_str(data.get("address")),
            "date_of_birth": _parse_date(data.get("date_of_birth")),
            "gender": _optional_str(data.get("gender")),
            "education": _optional_str(data.get("education")),
            "experience": _optional_str(data.get("experience")),
            "attachments": tuple(data.get("attachments") or ()),
            "created_at": _parse_datetime(data.get("created_at")),
        }
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "phone_number": self.phone_number,
            "email": self.email,
            "address": self.address,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "gender": self.gender,
            "education": self.education,
            "skills": self.skills.to_list(),
            "experience": self.experience,
            "attachments": list(self.attachments),
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Provider:
    """A company offering job openings."""
    company_name: str
    contact_person: str
    phone_number: str
    email: str
    id: str = field(default_factory=_new_id)
    address: Optional[str] = None
    industry: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Provider":
        kwargs = {
            "company_name": str(data["company_name"]).strip(),
            "contact_person": str(data["contact_person"]).strip(),
            "phone_number": str(data["phone_number"]).strip(),
            "email": str(data["email"]).strip(),
            "address": _optional_str(data.get("address")),
            "industry": _optional_str(data.get("industry")),
            "created_at": _parse_datetime(data.get("created_at")),
        }
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "company_name": self.company_name,
            "contact_person": self.contact_person,
            "phone_number": self.phone_number,
            "email": self.email,
            "address": self.address,
            "industry": self.industry,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Job:
    """
    An open position with required skills.

    The owning provider is referenced by id only and resolved by lookup when
    displayed; a Job never holds the Provider record itself.
    """
    provider_id: str
    title: str
    category: JobCategory
    description: str
    required_skills: SkillSet = field(default_factory=SkillSet)
    id: str = field(default_factory=_new_id)
    location: Optional[str] = None
    salary_range: Optional[str] = None
    openings: int = 1
    status: JobStatus = JobStatus.ACTIVE
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not isinstance(self.required_skills, SkillSet):
            object.__setattr__(self, "required_skills", SkillSet(self.required_skills))

    @property
    def is_active(self) -> bool:
        return self.status is JobStatus.ACTIVE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        """Build from intake data. Raises ValueError on unknown category or status."""
        kwargs = {
            "provider_id": str(data["provider_id"]).strip(),
            "title": str(data["title"]).strip(),
            "category": JobCategory(data["category"]),
            "description": str(data["description"]).strip(),
            "required_skills": SkillSet(data.get("required_skills") or ()),
            "location": _optional_str(data.get("location")),
            "salary_range": _optional_str(data.get("salary_range")),
            "openings": int(data.get("openings", 1)),
            "status": JobStatus(data.get("status") or JobStatus.ACTIVE.value),
            "created_at": _parse_datetime(data.get("created_at")),
        }
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "provider_id": self.provider_id,
            "title": self.title,
            "category": self.category.value,
            "description": self.description,
            "required_skills": self.required_skills.to_list(),
            "location": self.location,
            "salary_range": self.salary_range,
            "openings": self.openings,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Match:
    """Derived pairing of a beneficiary and a job with overlapping skills."""
    beneficiary: Beneficiary
    job: Job
    matching_skills: Tuple[str, ...]
    match_percentage: int  # 1-100, share of the job's required skills covered
    provider: Optional[Provider] = None

    def to_dict(self) -> dict:
        return {
            "beneficiary": self.beneficiary.to_dict(),
            "job": self.job.to_dict(),
            "provider": self.provider.to_dict() if self.provider else None,
            "matching_skills": list(self.matching_skills),
            "match_percentage": self.match_percentage,
        }
