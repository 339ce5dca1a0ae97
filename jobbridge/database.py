"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for beneficiary, provider and job storage.
"""

from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, Column, Date, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class BeneficiaryRecord(Base):
    """Registered beneficiary."""

    __tablename__ = "beneficiaries"

    id = Column(String, primary_key=True)
    full_name = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    email = Column(String)
    address = Column(Text)
    date_of_birth = Column(Date)
    gender = Column(String)
    education = Column(Text)
    skills = Column(JSON, nullable=False)  # ordered list of skill labels
    experience = Column(Text)
    attachments = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


class ProviderRecord(Base):
    """Employer offering job openings."""

    __tablename__ = "providers"

    id = Column(String, primary_key=True)
    company_name = Column(String, nullable=False)
    contact_person = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    email = Column(String, nullable=False)
    address = Column(Text)
    industry = Column(String)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


class JobRecord(Base):
    """Job opening. provider_id is a plain reference, not an owning relation."""

    __tablename__ = "jobs"

    id = Column(String, primary_key=True)
    provider_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    required_skills = Column(JSON, nullable=False)
    location = Column(String)
    salary_range = Column(String)
    openings = Column(Integer, nullable=False, default=1)
    status = Column(String, nullable=False, default="active", index=True)  # active, closed
    created_at = Column(DateTime, nullable=False, default=datetime.now)


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    engine.dispose()


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
