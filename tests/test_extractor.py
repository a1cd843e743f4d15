"""
Tests for resume text extraction and interpretation.
"""
import asyncio
from unittest.mock import MagicMock, patch

import pytest
import requests

from career_matcher.errors import DocumentUnavailable
from career_matcher.extractor import (
    ResumeInterpreter,
    fetch_document,
    ingest_resumes,
    parse_resume,
    parse_resume_source,
)


def test_extract_skills_tokens_and_phrases(sample_resume_text):
    skills = ResumeInterpreter().extract_skills(sample_resume_text)

    assert skills == {"python", "react", "docker", "node.js", "ci/cd", "machine learning"}


def test_single_word_skill_needs_whole_token():
    skills = ResumeInterpreter().extract_skills("JavaScript developer")

    assert "javascript" in skills
    assert "java" not in skills


def test_skill_dictionary_is_injectable():
    interpreter = ResumeInterpreter(["Rust", "event sourcing"])

    skills = interpreter.extract_skills("Wrote RUST services using Event Sourcing and Python")

    assert skills == {"rust", "event sourcing"}


def test_extract_experience_entries(sample_resume_text):
    experience = ResumeInterpreter.extract_experience(sample_resume_text)

    assert [e.title for e in experience] == ["Senior Software Engineer", "Developer"]
    assert experience[0].duration == "Jan 2019 - Dec 2021"
    assert experience[0].description == (
        "Built distributed data pipelines serving millions of users daily",
    )
    assert experience[1].duration == "2015-2018"
    assert all(e.company == "" for e in experience)


def test_experience_without_title_is_dropped():
    text = "2018 - present\nSome line that is long enough to be a description\n"

    assert ResumeInterpreter.extract_experience(text) == ()


def test_year_to_present_range():
    text = "2020 - Present\nLead Architect\n"

    experience = ResumeInterpreter.extract_experience(text)

    assert experience[0].title == "Lead Architect"
    assert experience[0].duration == "2020 - Present"


def test_extract_education(sample_resume_text):
    education = ResumeInterpreter.extract_education(sample_resume_text)

    assert len(education) == 1
    assert education[0].degree == "Bachelor of Science in Computer Science"
    assert education[0].institution == "State University"
    assert education[0].year == "2014"


def test_education_from_keyword():
    education = ResumeInterpreter.extract_education("PhD in Physics from MIT 2010")

    assert education[0].degree == "PhD in Physics"
    assert education[0].institution == "MIT 2010"
    assert education[0].year == "2010"


def test_parse_resume_builds_record(sample_resume_text):
    record = parse_resume(sample_resume_text)

    assert "python" in record.skills
    assert len(record.experience) == 2
    assert len(record.education) == 1


def test_fetch_document_reads_text_file(tmp_path):
    path = tmp_path / "cv.txt"
    path.write_text("Senior Engineer\n", encoding="utf-8")

    assert fetch_document(str(path)) == "Senior Engineer\n"


def test_fetch_document_missing_file(tmp_path):
    with pytest.raises(DocumentUnavailable):
        fetch_document(str(tmp_path / "missing.pdf"))


def test_fetch_document_empty_text(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("   \n", encoding="utf-8")

    with pytest.raises(DocumentUnavailable):
        fetch_document(str(path))


@patch("career_matcher.extractor.requests.get")
def test_fetch_document_url_failure(mock_get):
    mock_get.side_effect = requests.ConnectionError("unreachable")

    with pytest.raises(DocumentUnavailable):
        parse_resume_source("https://files.example.com/cv.pdf")


@patch("career_matcher.extractor.requests.get")
def test_fetch_document_url_text(mock_get):
    response = MagicMock()
    response.content = b"Python developer"
    response.headers = {"Content-Type": "text/plain"}
    mock_get.return_value = response

    record = parse_resume_source("https://files.example.com/cv.txt")

    assert record.skills == {"python"}
    response.raise_for_status.assert_called_once()


def test_ingest_resumes_stores_each_file(tmp_path):
    (tmp_path / "alice.txt").write_text("Python engineer", encoding="utf-8")
    (tmp_path / "bob.txt").write_text("", encoding="utf-8")
    (tmp_path / "notes.md").write_text("Python", encoding="utf-8")
    store = MagicMock()

    count = asyncio.run(ingest_resumes(tmp_path, store, workers=2))

    assert count == 2
    store.save_parsed_resume.assert_called_once()
    user_id, record = store.save_parsed_resume.call_args[0]
    assert user_id == "alice"
    assert record.skills == {"python"}
    store.log.assert_called_once()
    assert store.log.call_args.kwargs["meta"] == {"file": "bob.txt"}
