"""
Pytest configuration and shared fixtures.
"""

import os
import tempfile

# Keep log files out of the working tree; must run before jobbridge is imported
os.environ.setdefault("JOBBRIDGE_LOG_DIR", tempfile.mkdtemp(prefix="jobbridge-logs-"))

import pytest
from datetime import datetime
from pathlib import Path
from typing import Dict, Any

from jobbridge.models import Beneficiary, Job, JobCategory, JobStatus, Provider


@pytest.fixture
def valid_beneficiary_data() -> Dict[str, Any]:
    """Valid beneficiary intake data."""
    return {
        "full_name": "Asha Devi",
        "phone_number": "9876543210",
        "email": "asha@example.org",
        "address": "12 Market Road",
        "date_of_birth": "1990-04-12",
        "gender": "female",
        "education": "10th grade",
        "skills": ["Cook", "Maid"],
        "experience": "5 years household work",
        "attachments": ["attachments/asha/id-card.pdf"],
    }


@pytest.fixture
def valid_provider_data() -> Dict[str, Any]:
    """Valid provider intake data."""
    return {
        "company_name": "Sunrise Builders",
        "contact_person": "Ravi Kumar",
        "phone_number": "9123456780",
        "email": "hr@sunrise.example.com",
        "industry": "Construction",
    }


@pytest.fixture
def valid_job_data() -> Dict[str, Any]:
    """Valid job intake data (provider_id must be filled in by the test)."""
    return {
        "provider_id": "provider-1",
        "title": "Site Plumber",
        "category": "construction_labor",
        "description": "Plumbing work on residential sites",
        "required_skills": ["Plumbing", "Electrician", "Cook"],
        "location": "Pune",
        "salary_range": "15000-20000",
        "openings": 2,
    }


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Path to a not-yet-created SQLite database."""
    return tmp_path / "data" / "jobbridge.db"


@pytest.fixture
def make_beneficiary():
    """Factory for beneficiaries with the given skills."""
    def _make(name: str, skills, **kwargs) -> Beneficiary:
        kwargs.setdefault("phone_number", "9000000000")
        return Beneficiary(full_name=name, skills=skills, **kwargs)
    return _make


@pytest.fixture
def make_job():
    """Factory for jobs requiring the given skills."""
    def _make(title: str, required_skills, status=JobStatus.ACTIVE, **kwargs) -> Job:
        kwargs.setdefault("provider_id", "provider-1")
        kwargs.setdefault("category", JobCategory.CONSTRUCTION_LABOR)
        kwargs.setdefault("description", f"{title} position")
        return Job(title=title, required_skills=required_skills, status=status, **kwargs)
    return _make


@pytest.fixture
def sample_provider() -> Provider:
    return Provider(
        id="provider-1",
        company_name="Sunrise Builders",
        contact_person="Ravi Kumar",
        phone_number="9123456780",
        email="hr@sunrise.example.com",
        created_at=datetime(2024, 1, 5, 9, 0),
    )
