"""
Record store for beneficiaries, providers and jobs.

Responsibilities:
- Persist and load records through the SQLite database.
- Filter jobs by status on read.
- Convert between database rows and domain models.

Non-Responsibilities:
- No validation (callers validate intake data first).
- No matching.
"""

from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy.exc import OperationalError

from .database import BeneficiaryRecord, JobRecord, ProviderRecord, get_session, init_database
from .logger import get_logger
from .models import Beneficiary, Job, JobCategory, JobStatus, Provider, SkillSet
from .retry import exponential_backoff, is_transient_error

logger = get_logger()


def _log_retry(attempt: int, error: Exception, delay: float) -> None:
    logger.warning("Record store busy, retrying", attempt=attempt, delay=delay, error=str(error))


_retry_when_locked = exponential_backoff(
    max_retries=3,
    base_delay=0.2,
    max_delay=2.0,
    exceptions=(OperationalError,),
    on_retry=_log_retry,
    retry_if=is_transient_error,
)


# Row <-> model conversion

def _beneficiary_from_row(row: BeneficiaryRecord) -> Beneficiary:
    return Beneficiary(
        id=row.id,
        full_name=row.full_name,
        phone_number=row.phone_number,
        email=row.email,
        address=row.address,
        date_of_birth=row.date_of_birth,
        gender=row.gender,
        education=row.education,
        skills=SkillSet(row.skills or ()),
        experience=row.experience,
        attachments=tuple(row.attachments or ()),
        created_at=row.created_at,
    )


def _provider_from_row(row: ProviderRecord) -> Provider:
    return Provider(
        id=row.id,
        company_name=row.company_name,
        contact_person=row.contact_person,
        phone_number=row.phone_number,
        email=row.email,
        address=row.address,
        industry=row.industry,
        created_at=row.created_at,
    )


def _job_from_row(row: JobRecord) -> Job:
    return Job(
        id=row.id,
        provider_id=row.provider_id,
        title=row.title,
        category=JobCategory(row.category),
        description=row.description,
        required_skills=SkillSet(row.required_skills or ()),
        location=row.location,
        salary_range=row.salary_range,
        openings=row.openings,
        status=JobStatus(row.status),
        created_at=row.created_at,
    )


def _persist(db_path: Path, row) -> None:
    init_database(db_path)
    session = get_session(db_path)
    try:
        session.add(row)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# Writes

@_retry_when_locked
def save_beneficiary(beneficiary: Beneficiary, db_path: Path) -> None:
    _persist(db_path, BeneficiaryRecord(
        id=beneficiary.id,
        full_name=beneficiary.full_name,
        phone_number=beneficiary.phone_number,
        email=beneficiary.email,
        address=beneficiary.address,
        date_of_birth=beneficiary.date_of_birth,
        gender=beneficiary.gender,
        education=beneficiary.education,
        skills=beneficiary.skills.to_list(),
        experience=beneficiary.experience,
        attachments=list(beneficiary.attachments),
        created_at=beneficiary.created_at,
    ))
    logger.debug("Beneficiary stored", id=beneficiary.id)


@_retry_when_locked
def save_provider(provider: Provider, db_path: Path) -> None:
    _persist(db_path, ProviderRecord(
        id=provider.id,
        company_name=provider.company_name,
        contact_person=provider.contact_person,
        phone_number=provider.phone_number,
        email=provider.email,
        address=provider.address,
        industry=provider.industry,
        created_at=provider.created_at,
    ))
    logger.debug("Provider stored", id=provider.id)


@_retry_when_locked
def save_job(job: Job, db_path: Path) -> None:
    _persist(db_path, JobRecord(
        id=job.id,
        provider_id=job.provider_id,
        title=job.title,
        category=job.category.value,
        description=job.description,
        required_skills=job.required_skills.to_list(),
        location=job.location,
        salary_range=job.salary_range,
        openings=job.openings,
        status=job.status.value,
        created_at=job.created_at,
    ))
    logger.debug("Job stored", id=job.id, provider_id=job.provider_id)


@_retry_when_locked
def update_job_status(job_id: str, status: JobStatus, db_path: Path) -> Dict[str, str]:
    """
    Change a job's status.

    Returns:
        {"status": "updated" | "no-change" | "not-found"}
    """
    if not db_path.exists():
        return {"status": "not-found"}
    session = get_session(db_path)
    try:
        row = session.get(JobRecord, job_id)
        if row is None:
            return {"status": "not-found"}
        if row.status == status.value:
            return {"status": "no-change"}
        row.status = status.value
        session.commit()
        logger.info("Job status changed", id=job_id, status=status.value)
        return {"status": "updated"}
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# Reads

@_retry_when_locked
def load_beneficiaries(db_path: Path, newest_first: bool = False) -> List[Beneficiary]:
    """Load all beneficiaries in registration order (or newest first)."""
    if not db_path.exists():
        return []
    session = get_session(db_path)
    try:
        order = BeneficiaryRecord.created_at.desc() if newest_first else BeneficiaryRecord.created_at
        rows = session.query(BeneficiaryRecord).order_by(order, BeneficiaryRecord.id).all()
        return [_beneficiary_from_row(r) for r in rows]
    finally:
        session.close()


@_retry_when_locked
def load_providers(db_path: Path, newest_first: bool = False) -> List[Provider]:
    if not db_path.exists():
        return []
    session = get_session(db_path)
    try:
        order = ProviderRecord.created_at.desc() if newest_first else ProviderRecord.created_at
        rows = session.query(ProviderRecord).order_by(order, ProviderRecord.id).all()
        return [_provider_from_row(r) for r in rows]
    finally:
        session.close()


@_retry_when_locked
def get_provider(provider_id: str, db_path: Path) -> Optional[Provider]:
    if not db_path.exists():
        return None
    session = get_session(db_path)
    try:
        row = session.get(ProviderRecord, provider_id)
        return _provider_from_row(row) if row is not None else None
    finally:
        session.close()


@_retry_when_locked
def load_jobs(
    db_path: Path,
    status: Optional[JobStatus] = None,
    newest_first: bool = False,
) -> List[Job]:
    """
    Load jobs, optionally only those with the given status.

    Args:
        db_path: Path to SQLite database file
        status: Only return jobs in this status (default: all jobs)
        newest_first: Order by creation time descending instead of ascending
    """
    if not db_path.exists():
        return []
    session = get_session(db_path)
    try:
        query = session.query(JobRecord)
        if status is not None:
            query = query.filter(JobRecord.status == status.value)
        order = JobRecord.created_at.desc() if newest_first else JobRecord.created_at
        rows = query.order_by(order, JobRecord.id).all()
        return [_job_from_row(r) for r in rows]
    finally:
        session.close()


def provider_lookup(db_path: Path) -> Dict[str, Provider]:
    """Providers keyed by id, for resolving job.provider_id on display."""
    return {p.id: p for p in load_providers(db_path)}
