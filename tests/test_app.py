"""
Tests for intake registration, matching runs and the CLI.
"""

import json
import logging
from datetime import datetime, timedelta

import pytest

from jobbridge import __version__
from jobbridge.app import (
    format_match,
    main,
    register_beneficiary,
    register_job,
    register_provider,
    run_matching,
)
from jobbridge.models import JobStatus
from jobbridge.storage import load_beneficiaries, load_jobs, update_job_status


@pytest.fixture
def provider_id(db_path, valid_provider_data) -> str:
    outcome = register_provider(valid_provider_data, db_path)
    assert outcome["status"] == "created"
    return outcome["id"]


def _write_json(tmp_path, name: str, data) -> str:
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestRegistration:
    """Test record intake."""

    def test_register_beneficiary(self, db_path, valid_beneficiary_data):
        outcome = register_beneficiary(valid_beneficiary_data, db_path)

        assert outcome["status"] == "created"
        stored = load_beneficiaries(db_path)
        assert [b.id for b in stored] == [outcome["id"]]

    def test_invalid_beneficiary_not_stored(self, db_path, valid_beneficiary_data):
        valid_beneficiary_data["skills"] = []

        outcome = register_beneficiary(valid_beneficiary_data, db_path)

        assert outcome["status"] == "validation_error"
        assert outcome["id"] is None
        assert outcome["errors"]
        assert load_beneficiaries(db_path) == []

    def test_register_job_for_known_provider(self, db_path, provider_id, valid_job_data):
        valid_job_data["provider_id"] = provider_id

        outcome = register_job(valid_job_data, db_path)

        assert outcome["status"] == "created"
        jobs = load_jobs(db_path)
        assert jobs[0].provider_id == provider_id
        assert jobs[0].status is JobStatus.ACTIVE

    def test_register_job_unknown_provider(self, db_path, provider_id, valid_job_data):
        valid_job_data["provider_id"] = "no-such-provider"

        outcome = register_job(valid_job_data, db_path)

        assert outcome["status"] == "validation_error"
        assert any("no-such-provider" in e for e in outcome["errors"])
        assert load_jobs(db_path) == []

    def test_blank_date_of_birth_registered(self, db_path, valid_beneficiary_data):
        valid_beneficiary_data["date_of_birth"] = "   "

        outcome = register_beneficiary(valid_beneficiary_data, db_path)

        assert outcome["status"] == "created"
        assert load_beneficiaries(db_path)[0].date_of_birth is None

    def test_bad_created_at_rejected(self, db_path, valid_beneficiary_data):
        valid_beneficiary_data["created_at"] = "yesterday"

        outcome = register_beneficiary(valid_beneficiary_data, db_path)

        assert outcome["status"] == "validation_error"
        assert load_beneficiaries(db_path) == []

    def test_register_invalid_provider(self, db_path, valid_provider_data):
        valid_provider_data["email"] = "nope"

        assert register_provider(valid_provider_data, db_path)["status"] == "validation_error"


class TestRunMatching:
    """Test matching over stored records."""

    def test_matches_ranked_with_provider(self, db_path, provider_id, valid_job_data, valid_beneficiary_data):
        valid_job_data["provider_id"] = provider_id
        register_job(valid_job_data, db_path)  # Plumbing, Electrician, Cook
        valid_beneficiary_data["skills"] = ["Plumbing", "Cook"]
        register_beneficiary(valid_beneficiary_data, db_path)

        matches = run_matching(db_path)

        assert len(matches) == 1
        assert matches[0].match_percentage == 67
        assert matches[0].matching_skills == ("Plumbing", "Cook")
        assert matches[0].provider.id == provider_id

    def test_closed_jobs_ignored(self, db_path, provider_id, valid_job_data, valid_beneficiary_data):
        valid_job_data["provider_id"] = provider_id
        job_id = register_job(valid_job_data, db_path)["id"]
        valid_beneficiary_data["skills"] = ["Plumbing"]
        register_beneficiary(valid_beneficiary_data, db_path)

        update_job_status(job_id, JobStatus.CLOSED, db_path)

        assert run_matching(db_path) == []

    def test_ties_follow_registration_order(self, db_path, provider_id, valid_job_data):
        now = datetime.now()
        for offset, name in enumerate(["Early", "Late"]):
            register_beneficiary(
                {
                    "full_name": name,
                    "phone_number": "9000000000",
                    "skills": ["Cook"],
                    "created_at": (now + timedelta(minutes=offset)).isoformat(),
                },
                db_path,
            )
        valid_job_data.update(provider_id=provider_id, required_skills=["Cook"])
        register_job(valid_job_data, db_path)

        names = [m.beneficiary.full_name for m in run_matching(db_path)]

        assert names == ["Early", "Late"]

    def test_empty_store(self, db_path):
        assert run_matching(db_path) == []

    def test_format_match(self, db_path, provider_id, valid_job_data, valid_beneficiary_data):
        valid_job_data["provider_id"] = provider_id
        register_job(valid_job_data, db_path)
        valid_beneficiary_data["skills"] = ["Cook"]
        register_beneficiary(valid_beneficiary_data, db_path)

        text = format_match(run_matching(db_path)[0])

        assert "33% | Asha Devi -> Site Plumber (Sunrise Builders)" in text
        assert "Matching skills: Cook" in text
        assert "Location: Pune" in text


class TestCli:
    """Test the command line interface."""

    def test_version(self, capsys):
        main(["--version"])
        assert capsys.readouterr().out.strip() == __version__

    def test_add_and_list(self, tmp_path, db_path, capsys, valid_provider_data, valid_beneficiary_data):
        db = str(db_path)
        main(["--db", db, "add-provider", "--input", _write_json(tmp_path, "p.json", valid_provider_data)])
        main(["--db", db, "add-beneficiary", "--input", _write_json(tmp_path, "b.json", valid_beneficiary_data)])
        capsys.readouterr()

        main(["--db", db, "list-beneficiaries", "--name", "asha"])
        out = capsys.readouterr().out
        assert "Asha Devi" in out
        assert "Skills: Cook, Maid" in out

        main(["--db", db, "list-providers"])
        assert "Sunrise Builders" in capsys.readouterr().out

    def test_add_invalid_exits(self, tmp_path, db_path, capsys):
        path = _write_json(tmp_path, "b.json", {"full_name": "Ravi"})

        with pytest.raises(SystemExit) as exc_info:
            main(["--db", str(db_path), "add-beneficiary", "--input", path])

        assert exc_info.value.code == 2
        assert "validation_error" in capsys.readouterr().out

    def test_missing_input_file(self, tmp_path, db_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--db", str(db_path), "add-provider", "--input", str(tmp_path / "nope.json")])
        assert "not found" in str(exc_info.value.code)

    def test_validate(self, tmp_path, capsys, valid_job_data):
        main(["validate", "--kind", "job", "--input", _write_json(tmp_path, "j.json", valid_job_data)])
        assert "Valid" in capsys.readouterr().out

        valid_job_data["category"] = "astronaut"
        with pytest.raises(SystemExit):
            main(["validate", "--kind", "job", "--input", _write_json(tmp_path, "bad.json", valid_job_data)])
        assert "category" in capsys.readouterr().out

    def test_matches_json_and_close(self, tmp_path, db_path, capsys, provider_id, valid_job_data, valid_beneficiary_data):
        db = str(db_path)
        valid_job_data["provider_id"] = provider_id
        job_id = register_job(valid_job_data, db_path)["id"]
        valid_beneficiary_data["skills"] = ["Plumbing", "Electrician", "Cook"]
        register_beneficiary(valid_beneficiary_data, db_path)
        capsys.readouterr()

        main(["--db", db, "matches", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert [m["match_percentage"] for m in data] == [100]
        assert data[0]["provider"]["company_name"] == "Sunrise Builders"

        main(["--db", db, "close-job", "--id", job_id])
        assert "updated" in capsys.readouterr().out

        main(["--db", db, "matches"])
        assert "No matches found" in capsys.readouterr().out

        main(["--db", db, "list-jobs", "--status", "closed"])
        assert "Site Plumber" in capsys.readouterr().out

    def test_matches_limit(self, db_path, capsys, provider_id, valid_job_data):
        valid_job_data.update(provider_id=provider_id, required_skills=["Cook"])
        register_job(valid_job_data, db_path)
        for name in ["A", "B", "C"]:
            register_beneficiary({"full_name": name, "phone_number": "9000000000", "skills": ["Cook"]}, db_path)
        capsys.readouterr()

        main(["--db", str(db_path), "matches", "--json", "--limit", "2"])

        assert len(json.loads(capsys.readouterr().out)) == 2

    def test_negative_limit_rejected(self, db_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--db", str(db_path), "matches", "--limit", "-1"])
        assert "--limit" in str(exc_info.value.code)

    def test_metrics_summary_logged_at_debug(self, db_path, caplog):
        with caplog.at_level(logging.DEBUG, logger="jobbridge"):
            main(["--db", str(db_path), "matches"])

        summary = [r for r in caplog.records if "Session Metrics" in r.getMessage()]
        assert summary and summary[0].levelno == logging.DEBUG
        assert "Match runs:" in caplog.text

    def test_close_unknown_job(self, db_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--db", str(db_path), "close-job", "--id", "missing"])
        assert "not found" in str(exc_info.value.code)

    def test_bad_date_filter(self, db_path):
        with pytest.raises(SystemExit):
            main(["--db", str(db_path), "list-beneficiaries", "--date", "yesterday"])
