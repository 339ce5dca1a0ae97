import argparse
import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

from . import __version__
from .env import get_db_path, load_env
from .logger import get_logger
from .matching import compute_matches
from .models import Beneficiary, Job, JobStatus, Match, Provider
from .retry import RetryError
from .schema import validate_beneficiary, validate_job, validate_provider
from .search import filter_beneficiaries
from .storage import (
    get_provider,
    load_beneficiaries,
    load_jobs,
    load_providers,
    provider_lookup,
    save_beneficiary,
    save_job,
    save_provider,
    update_job_status,
)

logger = get_logger()


def register_beneficiary(data: dict, db_path: Path, strict: bool = False) -> dict:
    errors = validate_beneficiary(data, strict=strict)
    if errors:
        logger.record_validation_failure("beneficiary")
        logger.warning("Beneficiary rejected", errors=errors)
        return {"id": None, "status": "validation_error", "errors": errors}

    beneficiary = Beneficiary.from_dict(data)
    save_beneficiary(beneficiary, db_path)
    logger.record_created("beneficiary")
    logger.info("Beneficiary registered", id=beneficiary.id, skills=beneficiary.skills.to_list())
    return {"id": beneficiary.id, "status": "created"}


def register_provider(data: dict, db_path: Path) -> dict:
    errors = validate_provider(data)
    if errors:
        logger.record_validation_failure("provider")
        logger.warning("Provider rejected", errors=errors)
        return {"id": None, "status": "validation_error", "errors": errors}

    provider = Provider.from_dict(data)
    save_provider(provider, db_path)
    logger.record_created("provider")
    logger.info("Provider registered", id=provider.id, company=provider.company_name)
    return {"id": provider.id, "status": "created"}


def register_job(data: dict, db_path: Path, strict: bool = False) -> dict:
    errors = validate_job(data, strict=strict)
    if not errors and get_provider(data["provider_id"].strip(), db_path) is None:
        errors = [f"Unknown provider: {data['provider_id']}"]
    if errors:
        logger.record_validation_failure("job")
        logger.warning("Job rejected", errors=errors)
        return {"id": None, "status": "validation_error", "errors": errors}

    job = Job.from_dict(data)
    save_job(job, db_path)
    logger.record_created("job")
    logger.info("Job registered", id=job.id, provider_id=job.provider_id, title=job.title)
    return {"id": job.id, "status": "created"}


def run_matching(db_path: Path) -> List[Match]:
    """Load current records and rank every beneficiary/active-job pair."""
    beneficiaries = load_beneficiaries(db_path)
    jobs = load_jobs(db_path, status=JobStatus.ACTIVE)
    matches = compute_matches(beneficiaries, jobs, providers=provider_lookup(db_path))
    logger.record_match_run(len(matches))
    logger.info(
        "Matching complete",
        beneficiaries=len(beneficiaries),
        active_jobs=len(jobs),
        matches=len(matches),
    )
    return matches


def format_match(match: Match) -> str:
    company = match.provider.company_name if match.provider else "unknown provider"
    lines = [
        f"{match.match_percentage}% | {match.beneficiary.full_name} -> {match.job.title} ({company})",
        f"  Matching skills: {', '.join(match.matching_skills)}",
        f"  Required skills: {', '.join(match.job.required_skills)}",
    ]
    contact = [f"Phone: {match.beneficiary.phone_number}"]
    if match.beneficiary.email:
        contact.append(f"Email: {match.beneficiary.email}")
    if match.job.salary_range:
        contact.append(f"Salary: {match.job.salary_range}")
    if match.job.location:
        contact.append(f"Location: {match.job.location}")
    lines.append("  " + " | ".join(contact))
    return "\n".join(lines)


def _read_json(path_str: str) -> dict:
    input_path = Path(path_str)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise SystemExit(f"Input must be a JSON object: {input_path}")
    return data


def _print_outcome(outcome: dict) -> None:
    print(f"ID: {outcome['id']}")
    print(f"Status: {outcome['status']}")
    for e in outcome.get("errors", []):
        print(f" - {e}")


def cmd_add_beneficiary(args: argparse.Namespace) -> None:
    outcome = register_beneficiary(_read_json(args.input), Path(args.db), strict=args.strict)
    _print_outcome(outcome)
    if outcome["status"] == "validation_error":
        raise SystemExit(2)


def cmd_add_provider(args: argparse.Namespace) -> None:
    outcome = register_provider(_read_json(args.input), Path(args.db))
    _print_outcome(outcome)
    if outcome["status"] == "validation_error":
        raise SystemExit(2)


def cmd_add_job(args: argparse.Namespace) -> None:
    outcome = register_job(_read_json(args.input), Path(args.db), strict=args.strict)
    _print_outcome(outcome)
    if outcome["status"] == "validation_error":
        raise SystemExit(2)


def cmd_validate(args: argparse.Namespace) -> None:
    data = _read_json(args.input)
    if args.kind == "beneficiary":
        errors = validate_beneficiary(data, strict=args.strict)
    elif args.kind == "provider":
        errors = validate_provider(data)
    else:
        errors = validate_job(data, strict=args.strict)
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def cmd_list_beneficiaries(args: argparse.Namespace) -> None:
    created_on = None
    if args.date:
        try:
            created_on = date.fromisoformat(args.date)
        except ValueError:
            raise SystemExit(f"Invalid --date (expected YYYY-MM-DD): {args.date}")

    beneficiaries = filter_beneficiaries(
        load_beneficiaries(Path(args.db), newest_first=True),
        name=args.name or "",
        phone=args.phone or "",
        created_on=created_on,
    )
    if not beneficiaries:
        print("No beneficiaries found.")
        return
    print(f"Found {len(beneficiaries)} beneficiaries:\n")
    for b in beneficiaries:
        print(f"ID: {b.id}")
        print(f"  Name: {b.full_name}")
        print(f"  Phone: {b.phone_number}")
        print(f"  Email: {b.email or '-'}")
        print(f"  Skills: {', '.join(b.skills)}")
        print(f"  Registered: {b.created_at.strftime('%Y-%m-%d')}")
        print()


def cmd_list_providers(args: argparse.Namespace) -> None:
    providers = load_providers(Path(args.db), newest_first=True)
    if not providers:
        print("No providers found.")
        return
    print(f"Found {len(providers)} providers:\n")
    for p in providers:
        print(f"ID: {p.id}")
        print(f"  Company: {p.company_name}")
        print(f"  Contact: {p.contact_person} ({p.phone_number}, {p.email})")
        print(f"  Industry: {p.industry or '-'}")
        print()


def cmd_list_jobs(args: argparse.Namespace) -> None:
    db_path = Path(args.db)
    status = JobStatus(args.status) if args.status else None
    jobs = load_jobs(db_path, status=status, newest_first=True)
    if not jobs:
        print("No jobs found.")
        return
    providers = provider_lookup(db_path)
    print(f"Found {len(jobs)} jobs:\n")
    for j in jobs:
        provider = providers.get(j.provider_id)
        print(f"ID: {j.id}")
        print(f"  Title: {j.title}")
        print(f"  Company: {provider.company_name if provider else '-'}")
        print(f"  Category: {j.category.label}")
        print(f"  Required skills: {', '.join(j.required_skills)}")
        print(f"  Openings: {j.openings}")
        print(f"  Status: {j.status.value}")
        print()


def cmd_close_job(args: argparse.Namespace) -> None:
    outcome = update_job_status(args.id, JobStatus.CLOSED, Path(args.db))
    if outcome["status"] == "not-found":
        raise SystemExit(f"Job not found: {args.id}")
    print(f"Job: {args.id}")
    print(f"Status: {outcome['status']}")


def cmd_matches(args: argparse.Namespace) -> None:
    if args.limit is not None and args.limit < 0:
        raise SystemExit(f"Invalid --limit (must be 0 or more): {args.limit}")
    matches = run_matching(Path(args.db))
    if args.limit is not None:
        matches = matches[:args.limit]
    if args.json:
        print(json.dumps([m.to_dict() for m in matches], indent=2, ensure_ascii=False))
        return
    if not matches:
        print("No matches found. Add beneficiaries and job openings to see matches.")
        return
    print(f"Found {len(matches)} matches:\n")
    for m in matches:
        print(format_match(m))
        print()


def main(argv: Optional[List[str]] = None):
    # Load .env if present (JOBBRIDGE_DB, JOBBRIDGE_LOG_LEVEL, ...)
    load_env()
    parser = argparse.ArgumentParser(prog="jobbridge", description="JobBridge: beneficiary and job matching CLI")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", default=str(get_db_path()), help="Path to SQLite database (default: $JOBBRIDGE_DB or data/jobbridge.db)")

    subparsers = parser.add_subparsers(dest="command")
    ab = subparsers.add_parser("add-beneficiary", help="Register a beneficiary from a JSON file")
    ab.add_argument("--input", required=True, help="Path to beneficiary JSON")
    ab.add_argument("--strict", action="store_true", help="Only accept skills from the intake catalog")
    ab.set_defaults(func=cmd_add_beneficiary)

    ap = subparsers.add_parser("add-provider", help="Register a provider (employer) from a JSON file")
    ap.add_argument("--input", required=True, help="Path to provider JSON")
    ap.set_defaults(func=cmd_add_provider)

    aj = subparsers.add_parser("add-job", help="Register a job opening from a JSON file")
    aj.add_argument("--input", required=True, help="Path to job JSON")
    aj.add_argument("--strict", action="store_true", help="Only accept skills from the intake catalog")
    aj.set_defaults(func=cmd_add_job)

    val = subparsers.add_parser("validate", help="Validate a record JSON without storing it")
    val.add_argument("--kind", required=True, choices=["beneficiary", "provider", "job"], help="Record kind")
    val.add_argument("--input", required=True, help="Path to record JSON")
    val.add_argument("--strict", action="store_true", help="Only accept skills from the intake catalog")
    val.set_defaults(func=cmd_validate)

    lb = subparsers.add_parser("list-beneficiaries", help="List beneficiaries, newest first")
    lb.add_argument("--name", help="Filter by name (case-insensitive substring)")
    lb.add_argument("--phone", help="Filter by phone number substring")
    lb.add_argument("--date", help="Filter by registration date YYYY-MM-DD")
    lb.set_defaults(func=cmd_list_beneficiaries)

    lp = subparsers.add_parser("list-providers", help="List providers, newest first")
    lp.set_defaults(func=cmd_list_providers)

    lj = subparsers.add_parser("list-jobs", help="List job openings, newest first")
    lj.add_argument("--status", choices=[s.value for s in JobStatus], help="Only jobs with this status")
    lj.set_defaults(func=cmd_list_jobs)

    cj = subparsers.add_parser("close-job", help="Close a job opening so it no longer matches")
    cj.add_argument("--id", required=True, help="Job id")
    cj.set_defaults(func=cmd_close_job)

    mt = subparsers.add_parser("matches", help="Rank beneficiary/job matches by skill coverage")
    mt.add_argument("--limit", type=int, help="Show only the first N matches")
    mt.add_argument("--json", action="store_true", help="Print matches as JSON")
    mt.set_defaults(func=cmd_matches)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        try:
            args.func(args)
        except RetryError as e:
            logger.record_error(type(e.__cause__ or e).__name__)
            logger.error("Record store unavailable", error=str(e))
            raise SystemExit(f"Could not load records, try again: {e}")
        finally:
            logger.log_metrics_summary(level=logging.DEBUG)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
