"""
Tests for seeding the job catalog.
"""
import json
from unittest.mock import MagicMock

import pytest

from career_matcher.job_processor import add_job, job_from_text, load_jobs


def test_load_jobs_skips_invalid_entries(tmp_path):
    path = tmp_path / "jobs.json"
    path.write_text(
        json.dumps(
            [
                {"title": "Backend Engineer", "company": "Acme", "required_skills": ["python"]},
                {"company": "No Title"},
                {"title": "Designer", "company": "Studio", "location": "Remote"},
            ]
        ),
        encoding="utf-8",
    )
    db = MagicMock()

    inserted = load_jobs(path, db=db)

    assert [j.title for j in inserted] == ["Backend Engineer", "Designer"]
    assert db.insert_job.call_count == 2


def test_load_single_job(tmp_path):
    path = tmp_path / "job.json"
    path.write_text(json.dumps({"title": "Analyst", "company": "Beta"}), encoding="utf-8")

    assert len(load_jobs(path, db=MagicMock())) == 1


def test_load_jobs_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_jobs(tmp_path / "missing.json", db=MagicMock())


def test_job_from_text():
    job = job_from_text("JD001", "\nBackend Engineer\nWe need Python, SQL and Docker.\n")

    assert job.job_id == "JD001"
    assert job.title == "Backend Engineer"
    assert job.required_skills == {"python", "sql", "docker"}
    assert job.description == "We need Python, SQL and Docker."


def test_add_job_from_file(tmp_path):
    path = tmp_path / "jd.txt"
    path.write_text("Frontend Developer\nReact and TypeScript", encoding="utf-8")
    db = MagicMock()

    job = add_job("JD002", path, db=db)

    assert job.required_skills == {"react", "typescript"}
    db.insert_job.assert_called_once_with(job)
